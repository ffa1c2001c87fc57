# YAML level files -> VoxelGrid
# src/world/loader.py
"""
Level loading.

A level file is YAML:

    name: stairs
    layout:
      kind: square        # or "hex"
      cell_size: 1.0
      cell_height: 1.0
      diagonal: false
    tiles:                # optional extra characters
      "~": {occupancy: 1, cost: 2.5}
    layers:               # bottom layer (y = 0) first
      - |
        #####
        #####
      - |
        S...G

Inside a layer, each row is one z and each character one x. Default
characters: "." and " " empty, "#" solid, "S" and "G" goal-contact
surfaces (their coordinates are also recorded as start / goal markers).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import yaml

from contracts.errors import ConfigError
from contracts.types import Coord
from contracts.world import EMPTY, GOAL_CONTACT, SOLID

from .grid import VoxelGrid
from .layout import GridLayout, SquareLayout, make_layout

# char -> (occupancy, cost)
DEFAULT_TILES: Dict[str, Tuple[int, float]] = {
    ".": (EMPTY, 0.0),
    " ": (EMPTY, 0.0),
    "#": (SOLID, 0.0),
    "S": (GOAL_CONTACT, 0.0),
    "G": (GOAL_CONTACT, 0.0),
}

MARKER_CHARS = ("S", "G")


@dataclass
class Level:
    """A loaded level plus the endpoint markers found in it."""

    name: str
    grid: VoxelGrid
    markers: Dict[str, List[Coord]] = field(default_factory=dict)

    def marker(self, char: str) -> Optional[Coord]:
        found = self.markers.get(char) or []
        return found[0] if found else None


def grid_from_layers(
    layers: Sequence[str],
    tiles: Optional[Mapping[str, Tuple[int, float]]] = None,
    layout: Optional[GridLayout] = None,
) -> Tuple[VoxelGrid, Dict[str, List[Coord]]]:
    """
    Build a VoxelGrid from ASCII layers (bottom first).

    Returns the grid and a mapping of marker char -> coordinates.
    """
    if not layers:
        raise ConfigError("level needs at least one layer")

    table = dict(DEFAULT_TILES)
    if tiles:
        table.update(tiles)

    rows_per_layer = [
        [row for row in layer.splitlines() if row.strip() != ""] for layer in layers
    ]
    size_x = max((len(row) for rows in rows_per_layer for row in rows), default=0)
    size_y = len(rows_per_layer)
    size_z = max((len(rows) for rows in rows_per_layer), default=0)
    if size_x == 0 or size_z == 0:
        raise ConfigError("level layers are empty")

    occupancy = np.zeros((size_x, size_y, size_z), dtype=np.int16)
    costs = np.zeros((size_x, size_y, size_z), dtype=np.float32)
    markers: Dict[str, List[Coord]] = {}

    for y, rows in enumerate(rows_per_layer):
        for z, row in enumerate(rows):
            for x, char in enumerate(row):
                if char not in table:
                    raise ConfigError(
                        f"unknown tile {char!r} at layer {y}, row {z}, column {x}"
                    )
                value, cost = table[char]
                occupancy[x, y, z] = value
                costs[x, y, z] = cost
                if char in MARKER_CHARS:
                    markers.setdefault(char, []).append((x, y, z))

    grid = VoxelGrid(occupancy_map=occupancy, costs=costs, layout=layout or SquareLayout())
    return grid, markers


def _parse_tiles(raw: Any) -> Dict[str, Tuple[int, float]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'tiles' must be a mapping, got {type(raw).__name__}")

    tiles: Dict[str, Tuple[int, float]] = {}
    for char, tile in raw.items():
        if not isinstance(char, str) or len(char) != 1:
            raise ConfigError(f"tile keys must be single characters, got {char!r}")
        tile = tile or {}
        if not isinstance(tile, dict):
            raise ConfigError(f"tile {char!r} must be a mapping, got {type(tile).__name__}")
        try:
            occupancy = int(tile.get("occupancy", SOLID))
            cost = float(tile.get("cost", 0.0))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"tile {char!r} has a non-numeric value: {exc}") from exc
        if not math.isfinite(cost) or cost < 0:
            raise ConfigError(f"tile {char!r} needs a finite cost >= 0, got {cost}")
        tiles[char] = (occupancy, cost)
    return tiles


def parse_level(
    data: Mapping[str, Any],
    default_name: str = "level",
    default_layout: Optional[GridLayout] = None,
) -> Level:
    """
    Build a Level from an already-parsed YAML mapping.

    `default_layout` is used when the level has no `layout` block
    (falls back to a unit SquareLayout).
    """
    layout_raw = data.get("layout")
    if layout_raw is None:
        layout = default_layout or SquareLayout()
    elif isinstance(layout_raw, dict):
        try:
            cell_size = float(layout_raw.get("cell_size", 1.0))
            cell_height = float(layout_raw.get("cell_height", 1.0))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"layout cell sizes must be numbers: {exc}") from exc
        if not (math.isfinite(cell_size) and math.isfinite(cell_height)):
            raise ConfigError("layout cell sizes must be finite")
        layout = make_layout(
            kind=str(layout_raw.get("kind", "square")),
            cell_size=cell_size,
            cell_height=cell_height,
            diagonal=bool(layout_raw.get("diagonal", False)),
        )
    else:
        raise ConfigError("'layout' must be a mapping")

    layers = data.get("layers")
    if not isinstance(layers, list) or not all(isinstance(l, str) for l in layers):
        raise ConfigError("'layers' must be a list of text blocks")

    grid, markers = grid_from_layers(layers, _parse_tiles(data.get("tiles")), layout)
    return Level(name=str(data.get("name", default_name)), grid=grid, markers=markers)


def load_level(path: Path, default_layout: Optional[GridLayout] = None) -> Level:
    """Load a YAML level file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing level file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected mapping at top of {path}, got {type(data)}")
    return parse_level(data, default_name=path.stem, default_layout=default_layout)

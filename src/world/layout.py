# grid <-> world coordinate layouts
# src/world/layout.py
"""
Coordinate layouts for voxel worlds.

A layout owns the planar adjacency of the grid and the mapping between
integer coordinates and world positions. Two layouts are provided:

- SquareLayout: classic voxel columns, 4- or 8-connected on the x-z plane.
- HexLayout: pointy-top hex columns in axial coordinates (q = x, r = z),
  6-connected on the x-z plane.

The vertical axis (y) is a plain stack of layers in both layouts.

World positions are cell centers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from contracts.errors import ConfigError
from contracts.types import Coord, Vec3

from .geometry import vec_distance, vec_sub

SQRT3 = math.sqrt(3.0)

SQUARE_DIRECTIONS_4: Tuple[Coord, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 0, 1),
    (0, 0, -1),
)

SQUARE_DIRECTIONS_8: Tuple[Coord, ...] = SQUARE_DIRECTIONS_4 + (
    (1, 0, 1),
    (1, 0, -1),
    (-1, 0, 1),
    (-1, 0, -1),
)

# Axial neighbors (dq, 0, dr)
HEX_DIRECTIONS: Tuple[Coord, ...] = (
    (1, 0, 0),
    (1, 0, -1),
    (0, 0, -1),
    (-1, 0, 0),
    (-1, 0, 1),
    (0, 0, 1),
)


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


class GridLayout:
    """
    Shared behaviour for concrete layouts.

    Subclasses provide `directions`, `to_world`, `nearest_coord`,
    `flat_distance` and `half_extents`.
    """

    cell_size: float
    cell_height: float

    @property
    def directions(self) -> Tuple[Coord, ...]:
        raise NotImplementedError

    @property
    def half_extents(self) -> Vec3:
        """Half size of a cell's bounding box in world units."""
        raise NotImplementedError

    def to_world(self, coord: Coord) -> Vec3:
        raise NotImplementedError

    def nearest_coord(self, position: Vec3) -> Coord:
        raise NotImplementedError

    def flat_distance(self, a: Coord, b: Coord) -> int:
        """Number of planar steps between two columns (ignores y)."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _touching_directions(self) -> Tuple[Coord, ...]:
        return self.directions

    def world_distance(self, a: Coord, b: Coord) -> float:
        return vec_distance(self.to_world(a), self.to_world(b))

    def surrounding_offsets(self) -> List[Coord]:
        """
        Offsets of every cell whose bounding box can touch a point that
        rounds to the origin cell: the cell itself plus every planar
        neighbor, on the layer below, the same layer and the layer above.
        """
        planar: List[Coord] = [(0, 0, 0)]
        planar.extend(self._touching_directions())

        offsets: List[Coord] = []
        for dy in (-1, 0, 1):
            for dx, _, dz in planar:
                offsets.append((dx, dy, dz))
        return offsets

    def line_loose(self, a: Coord, b: Coord, radius: float) -> List[Coord]:
        """
        Rasterize the segment between two cell centers, loosely.

        The segment is sampled every `radius` world units; at each sample
        the center and two points offset by `radius` perpendicular to the
        segment (on the x-z plane) are snapped to their nearest cell.
        Both endpoints are included. Order follows the segment, duplicates
        removed.
        """
        if radius <= 0:
            raise ValueError(f"line_loose radius must be positive, got {radius}")

        pa = self.to_world(a)
        pb = self.to_world(b)
        delta = vec_sub(pb, pa)
        length = math.sqrt(delta[0] ** 2 + delta[1] ** 2 + delta[2] ** 2)
        steps = max(1, int(math.ceil(length / radius)))

        perp_x, perp_z = -delta[2], delta[0]
        perp_len = math.hypot(perp_x, perp_z)
        if perp_len > 0:
            perp_x = perp_x / perp_len * radius
            perp_z = perp_z / perp_len * radius

        seen: Dict[Coord, None] = {a: None}
        for i in range(steps + 1):
            t = i / steps
            px = pa[0] + delta[0] * t
            py = pa[1] + delta[1] * t
            pz = pa[2] + delta[2] * t
            for side in (0.0, 1.0, -1.0):
                sample = (px + perp_x * side, py, pz + perp_z * side)
                seen.setdefault(self.nearest_coord(sample), None)
        seen.setdefault(b, None)
        return list(seen)


@dataclass(frozen=True)
class SquareLayout(GridLayout):
    cell_size: float = 1.0
    cell_height: float = 1.0
    diagonal: bool = False

    @property
    def directions(self) -> Tuple[Coord, ...]:
        return SQUARE_DIRECTIONS_8 if self.diagonal else SQUARE_DIRECTIONS_4

    @property
    def half_extents(self) -> Vec3:
        return (self.cell_size / 2, self.cell_height / 2, self.cell_size / 2)

    def _touching_directions(self) -> Tuple[Coord, ...]:
        # corner boxes touch even when movement is 4-connected
        return SQUARE_DIRECTIONS_8

    def to_world(self, coord: Coord) -> Vec3:
        x, y, z = coord
        return (x * self.cell_size, y * self.cell_height, z * self.cell_size)

    def nearest_coord(self, position: Vec3) -> Coord:
        wx, wy, wz = position
        return (
            _round_half_up(wx / self.cell_size),
            _round_half_up(wy / self.cell_height),
            _round_half_up(wz / self.cell_size),
        )

    def flat_distance(self, a: Coord, b: Coord) -> int:
        dx = abs(a[0] - b[0])
        dz = abs(a[2] - b[2])
        if self.diagonal:
            return max(dx, dz)
        return dx + dz


@dataclass(frozen=True)
class HexLayout(GridLayout):
    """
    Pointy-top hex columns; `cell_size` is the hex outer radius.
    """

    cell_size: float = 1.0
    cell_height: float = 1.0

    @property
    def directions(self) -> Tuple[Coord, ...]:
        return HEX_DIRECTIONS

    @property
    def half_extents(self) -> Vec3:
        return (self.cell_size * SQRT3 / 2, self.cell_height / 2, self.cell_size)

    def to_world(self, coord: Coord) -> Vec3:
        q, y, r = coord
        return (
            self.cell_size * SQRT3 * (q + r / 2),
            y * self.cell_height,
            self.cell_size * 1.5 * r,
        )

    def nearest_coord(self, position: Vec3) -> Coord:
        wx, wy, wz = position
        qf = (SQRT3 / 3 * wx - wz / 3) / self.cell_size
        rf = (2 / 3 * wz) / self.cell_size
        q, r = _cube_round(qf, rf)
        return (q, _round_half_up(wy / self.cell_height), r)

    def flat_distance(self, a: Coord, b: Coord) -> int:
        dq = a[0] - b[0]
        dr = a[2] - b[2]
        return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


def _cube_round(qf: float, rf: float) -> Tuple[int, int]:
    """Round fractional axial coordinates to the containing hex."""
    sf = -qf - rf
    q, r, s = round(qf), round(rf), round(sf)
    dq, dr, ds = abs(q - qf), abs(r - rf), abs(s - sf)
    if dq > dr and dq > ds:
        q = -r - s
    elif dr > ds:
        r = -q - s
    return int(q), int(r)


def make_layout(
    kind: str,
    cell_size: float = 1.0,
    cell_height: float = 1.0,
    diagonal: bool = False,
) -> GridLayout:
    """Build a layout from its config name ("square" or "hex")."""
    if cell_size <= 0 or cell_height <= 0:
        raise ConfigError(
            f"cell_size and cell_height must be positive, got {cell_size}, {cell_height}"
        )
    kind = kind.lower()
    if kind == "square":
        return SquareLayout(cell_size=cell_size, cell_height=cell_height, diagonal=diagonal)
    if kind == "hex":
        return HexLayout(cell_size=cell_size, cell_height=cell_height)
    raise ConfigError(f"Unknown layout kind: {kind!r} (expected 'square' or 'hex')")

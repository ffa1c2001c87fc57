# dense voxel world backed by numpy arrays
# src/world/grid.py
"""
VoxelGrid: the concrete GridWorld used by the pathfinder.

This module does not know anything about search. It only:
- Stores occupancy and terrain cost per cell (dense numpy arrays).
- Delegates the grid <-> world mapping to a GridLayout.

Out-of-bounds reads are treated as empty air with zero cost, so a cell on
the top layer always has headroom and nothing outside the grid is ever
moveable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np

from contracts.errors import WorldDataError
from contracts.types import Coord, Vec3
from contracts.world import EMPTY, SOLID

from .layout import GridLayout, SquareLayout


@dataclass
class VoxelGrid:
    """
    Dense 3-D grid indexed as [x, y, z].

    Parameters:
        occupancy:
            Integer array; 0 = empty, > 0 = solid, GOAL_CONTACT marks
            endpoint surfaces.

        costs:
            Float array of per-cell terrain cost, same shape. Defaults to
            zeros.

        layout:
            Coordinate layout (square or hex).
    """

    occupancy_map: np.ndarray
    costs: np.ndarray | None = None
    layout: GridLayout = field(default_factory=SquareLayout)

    def __post_init__(self) -> None:
        self.occupancy_map = np.asarray(self.occupancy_map, dtype=np.int16)
        if self.occupancy_map.ndim != 3:
            raise ValueError(
                f"occupancy map must be 3-D, got shape {self.occupancy_map.shape}"
            )
        if self.costs is None:
            self.costs = np.zeros(self.occupancy_map.shape, dtype=np.float32)
        else:
            self.costs = np.asarray(self.costs, dtype=np.float32)
            if self.costs.shape != self.occupancy_map.shape:
                raise ValueError(
                    f"cost map shape {self.costs.shape} does not match "
                    f"occupancy shape {self.occupancy_map.shape}"
                )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def empty(
        cls,
        size_x: int,
        size_y: int,
        size_z: int,
        layout: GridLayout | None = None,
    ) -> "VoxelGrid":
        return cls(
            occupancy_map=np.zeros((size_x, size_y, size_z), dtype=np.int16),
            layout=layout or SquareLayout(),
        )

    def set_cell(self, coord: Coord, value: int = SOLID, cost: float | None = None) -> None:
        """Edit a cell. Only valid while no search is using this grid."""
        if not self.in_bounds(coord):
            raise IndexError(f"coord {coord} outside grid of shape {self.shape}")
        self.occupancy_map[coord] = value
        if cost is not None:
            self.costs[coord] = cost

    def fill(self, lo: Coord, hi: Coord, value: int = SOLID, cost: float | None = None) -> None:
        """Fill the inclusive box lo..hi."""
        (x0, y0, z0), (x1, y1, z1) = lo, hi
        region = (slice(x0, x1 + 1), slice(y0, y1 + 1), slice(z0, z1 + 1))
        self.occupancy_map[region] = value
        if cost is not None:
            self.costs[region] = cost

    # ------------------------------------------------------------------
    # GridWorld protocol
    # ------------------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int, int]:
        sx, sy, sz = self.occupancy_map.shape
        return int(sx), int(sy), int(sz)

    @property
    def lateral_directions(self) -> Sequence[Coord]:
        return self.layout.directions

    def in_bounds(self, coord: Coord) -> bool:
        x, y, z = coord
        sx, sy, sz = self.shape
        return 0 <= x < sx and 0 <= y < sy and 0 <= z < sz

    def occupancy(self, coord: Coord) -> int:
        if not self.in_bounds(coord):
            return EMPTY
        return int(self.occupancy_map[coord])

    def terrain_cost(self, coord: Coord) -> float:
        if not self.in_bounds(coord):
            raise WorldDataError(f"no terrain cost outside the grid: {coord}")
        return float(self.costs[coord])

    def to_world(self, coord: Coord) -> Vec3:
        return self.layout.to_world(coord)

    def nearest_coord(self, position: Vec3) -> Coord:
        return self.layout.nearest_coord(position)

    # ------------------------------------------------------------------
    # Queries used by query setup / tools
    # ------------------------------------------------------------------

    def is_solid(self, coord: Coord) -> bool:
        return self.occupancy(coord) > EMPTY


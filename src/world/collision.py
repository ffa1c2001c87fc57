# src/world/collision.py
"""
Voxel collision helpers.

This is a minimal geometry layer standing in for a physics engine. It
answers one question for the visibility oracle: does a sphere swept along a
segment touch any solid voxel?

Each solid cell is treated as its axis-aligned bounding box (exact for the
square layout, slightly conservative for hex columns). The sweep is
sampled every half radius, which cannot tunnel through a box whose
thickness is at least the sphere diameter.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Set

from contracts.types import Coord, Vec3
from contracts.world import GridWorld

from .geometry import sphere_intersects_box, vec_add, vec_length, vec_scale
from .layout import GridLayout

logger = logging.getLogger(__name__)


@dataclass
class VoxelCollider:
    """
    Collider over a GridWorld's solid cells.

    Parameters:
        world:
            Grid to test against (read-only).

        layout:
            Layout providing cell bounding boxes and the neighborhood to
            scan around each sample point.
    """

    world: GridWorld
    layout: GridLayout
    _offsets: List[Coord] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._offsets = self.layout.surrounding_offsets()

    def sphere_cast(
        self,
        origin: Vec3,
        direction: Vec3,
        radius: float,
        max_distance: float,
    ) -> bool:
        """
        Return True if a sphere of `radius` moved from `origin` along
        `direction` for `max_distance` overlaps any solid cell.

        A zero-length direction degenerates to an overlap test at origin.
        """
        if radius <= 0:
            raise ValueError(f"sphere_cast radius must be positive, got {radius}")

        length = vec_length(direction)
        if length == 0.0 or max_distance <= 0.0:
            return self.overlaps(origin, radius)

        unit = vec_scale(direction, 1.0 / length)
        step = radius * 0.5
        samples = max(1, int(math.ceil(max_distance / step)))

        empty: Set[Coord] = set()
        for i in range(samples + 1):
            center = vec_add(origin, vec_scale(unit, max_distance * i / samples))
            if self._overlaps(center, radius, empty):
                return True
        return False

    def overlaps(self, center: Vec3, radius: float) -> bool:
        return self._overlaps(center, radius, set())

    def _overlaps(self, center: Vec3, radius: float, empty: Set[Coord]) -> bool:
        cx, cy, cz = self.layout.nearest_coord(center)
        half = self.layout.half_extents

        for dx, dy, dz in self._offsets:
            cell = (cx + dx, cy + dy, cz + dz)
            if cell in empty:
                continue
            if self.world.occupancy(cell) <= 0:
                empty.add(cell)
                continue
            if sphere_intersects_box(center, radius, self.layout.to_world(cell), half):
                logger.debug("sphere cast hit solid cell %s", cell)
                return True
        return False

# src/world/visibility.py
"""
Line-of-sight oracle used for any-angle shortcuts.

Two checks must both pass:

1. Ground continuity: every cell on a loose line between the two
   coordinates has ground (occupancy > 0). An agent walking the straight
   segment never steps into a hole.
2. Clearance: a sphere cast between the two world positions, lifted by
   `clearance` to approximate the agent's body, hits nothing.

Any error raised by the world or the collider is treated as "no line of
sight"; the search just loses the shortcut for that relaxation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from contracts.errors import WorldDataError
from contracts.types import Coord
from contracts.world import Collider, GridWorld

from .geometry import vec_add, vec_length, vec_sub
from .layout import GridLayout

logger = logging.getLogger(__name__)


@dataclass
class LineOfSightOracle:
    """
    Parameters:
        world:
            Grid queried for ground continuity.

        layout:
            Layout used to rasterize the loose line.

        collider:
            Geometry for the sphere cast.

        cast_radius:
            Radius of the swept sphere (agent half-width).

        clearance:
            Upward offset of the cast from the cell's world position.

        sample_radius:
            Spacing / lateral probe of the ground rasterization. Defaults
            to half the cast radius.
    """

    world: GridWorld
    layout: GridLayout
    collider: Collider
    cast_radius: float = 0.3
    clearance: float = 1.0
    sample_radius: Optional[float] = None

    def __post_init__(self) -> None:
        if self.cast_radius <= 0:
            raise ValueError(f"cast_radius must be positive, got {self.cast_radius}")
        if self.sample_radius is None:
            self.sample_radius = self.cast_radius / 2
        if self.sample_radius <= 0:
            raise ValueError(f"sample_radius must be positive, got {self.sample_radius}")

    def has_line_of_sight(self, from_coord: Coord, to_coord: Coord) -> bool:
        try:
            return self._has_ground(from_coord, to_coord) and self._is_clear(
                from_coord, to_coord
            )
        except (WorldDataError, LookupError, ValueError) as exc:
            logger.debug(
                "line of sight %s -> %s unavailable (%r); treating as blocked",
                from_coord,
                to_coord,
                exc,
            )
            return False

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _has_ground(self, from_coord: Coord, to_coord: Coord) -> bool:
        for cell in self.layout.line_loose(from_coord, to_coord, self.sample_radius):
            if self.world.occupancy(cell) <= 0:
                return False
        return True

    def _is_clear(self, from_coord: Coord, to_coord: Coord) -> bool:
        lift = (0.0, self.clearance, 0.0)
        start = vec_add(self.world.to_world(from_coord), lift)
        end = vec_add(self.world.to_world(to_coord), lift)
        direction = vec_sub(end, start)
        hit = self.collider.sphere_cast(
            start, direction, self.cast_radius, vec_length(direction)
        )
        return not hit

# src/nav/neighbors.py
"""
Neighbor generation for the voxel pathfinder.

For every planar direction and every vertical offset i in (-1, 0, +1):

- candidate = origin + direction + (0, i, 0)
- moveable candidate  -> WALK (i == 0), JUMP (i > 0) or FALL (i < 0)
- otherwise it is a gap: probe one more step in the same direction and
  emit a GAP_JUMP to that landing spot if it is moveable and both the
  origin's headroom and the cell above the gap are empty.

Occupancy data that cannot be read fails closed: the cell counts as
neither moveable nor empty.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from contracts.errors import WorldDataError
from contracts.types import ActionType, Coord, PathNode
from contracts.world import EMPTY, GridWorld

logger = logging.getLogger(__name__)

VERTICAL_OFFSETS = (-1, 0, 1)


def _offset(coord: Coord, dx: int, dy: int, dz: int) -> Coord:
    return (coord[0] + dx, coord[1] + dy, coord[2] + dz)


def _above(coord: Coord) -> Coord:
    return (coord[0], coord[1] + 1, coord[2])


class NeighborGenerator:
    def __init__(self, world: GridWorld) -> None:
        self.world = world
        self.directions = tuple(world.lateral_directions)

    def _occupancy(self, coord: Coord) -> Optional[int]:
        try:
            value = self.world.occupancy(coord)
        except (WorldDataError, LookupError) as exc:
            logger.debug("occupancy unavailable at %s: %r", coord, exc)
            return None
        if not hasattr(value, "__index__"):
            logger.debug("occupancy at %s is not an integer: %r", coord, value)
            return None
        return int(value)

    def is_empty(self, coord: Coord) -> bool:
        return self._occupancy(coord) == EMPTY

    def is_moveable(self, coord: Coord) -> bool:
        """Solid terrain with an empty cell directly above it."""
        ground = self._occupancy(coord)
        if ground is None or ground <= EMPTY:
            return False
        return self.is_empty(_above(coord))

    def adjacent(self, origin: Coord) -> List[PathNode]:
        found: List[PathNode] = []
        origin_headroom_clear: Optional[bool] = None

        for dx, _, dz in self.directions:
            for i in VERTICAL_OFFSETS:
                candidate = _offset(origin, dx, i, dz)

                if self.is_moveable(candidate):
                    if i == 0:
                        action = ActionType.WALK
                    elif i > 0:
                        action = ActionType.JUMP
                    else:
                        action = ActionType.FALL
                    found.append(PathNode(candidate, action))
                    continue

                # gap: try to jump over it
                landing = _offset(candidate, dx, 0, dz)
                if not self.is_moveable(landing):
                    continue
                if origin_headroom_clear is None:
                    origin_headroom_clear = self.is_empty(_above(origin))
                if origin_headroom_clear and self.is_empty(_above(candidate)):
                    found.append(PathNode(landing, ActionType.GAP_JUMP))

        return found

# src/world/query.py
"""
Query setup: turn requested endpoints into searchable coordinates.

Runs before any search. Problems found here are reported as
QuerySetupError so the engine never receives an invalid start or goal.
"""

from __future__ import annotations

import logging
from typing import Tuple

from contracts.errors import QuerySetupError
from contracts.types import Coord, Vec3
from contracts.world import EMPTY, GOAL_CONTACT, GridWorld

logger = logging.getLogger(__name__)

# Matches the scan height used by level authoring tools.
DEFAULT_CONTACT_SCAN_HEIGHT = 50


def in_bounds(world: GridWorld, coord: Coord) -> bool:
    sx, sy, sz = world.shape
    x, y, z = coord
    return 0 <= x < sx and 0 <= y < sy and 0 <= z < sz


def is_standable(world: GridWorld, coord: Coord) -> bool:
    """Solid cell with an empty cell directly above it."""
    x, y, z = coord
    return world.occupancy(coord) > EMPTY and world.occupancy((x, y + 1, z)) == EMPTY


def goal_contact(
    world: GridWorld,
    position: Vec3,
    max_height: int = DEFAULT_CONTACT_SCAN_HEIGHT,
) -> Coord:
    """
    Find the goal-contact surface under/over a world position.

    Snap the position to its column, then scan upward from y = 0 until a
    GOAL_CONTACT cell is found or `max_height` is reached.
    """
    x, _, z = world.nearest_coord(position)
    y = 0
    while y < max_height:
        if world.occupancy((x, y, z)) == GOAL_CONTACT:
            return (x, y, z)
        y += 1

    raise QuerySetupError(
        f"no goal-contact surface in column ({x}, {z}) below y={max_height}",
        coord=(x, max_height, z),
    )


def validate_endpoint(world: GridWorld, coord: Coord, role: str) -> Coord:
    """Raise QuerySetupError unless `coord` is an in-bounds standable cell."""
    if not in_bounds(world, coord):
        raise QuerySetupError(
            f"{role} {coord} is outside the grid {world.shape}", coord=coord
        )
    if not is_standable(world, coord):
        raise QuerySetupError(
            f"{role} {coord} is not traversable terrain", coord=coord
        )
    return coord


def resolve_query(
    world: GridWorld,
    start_position: Vec3,
    goal_position: Vec3,
    max_height: int = DEFAULT_CONTACT_SCAN_HEIGHT,
) -> Tuple[Coord, Coord]:
    """World positions -> validated (start, goal) coordinates."""
    start = validate_endpoint(world, goal_contact(world, start_position, max_height), "start")
    goal = validate_endpoint(world, goal_contact(world, goal_position, max_height), "goal")
    logger.debug("resolved query %s -> %s", start, goal)
    return start, goal

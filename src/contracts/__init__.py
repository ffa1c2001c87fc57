# src/contracts/__init__.py
"""
Shared contracts for the pathfinding core.

Everything here is dependency-free: plain types, the exception hierarchy and
the Protocols that the search engine consumes from its collaborators.
"""

from __future__ import annotations

from .types import (
    Coord,
    Vec3,
    ActionType,
    PathNode,
    SearchStatus,
    Waypoint,
    PathResult,
)
from .errors import (
    PathfindingError,
    QuerySetupError,
    WorldDataError,
    PathReconstructionError,
    ConfigError,
)
from .world import GridWorld, VisibilityOracle, Collider, EMPTY, SOLID, GOAL_CONTACT

__all__ = [
    "Coord",
    "Vec3",
    "ActionType",
    "PathNode",
    "SearchStatus",
    "Waypoint",
    "PathResult",
    "PathfindingError",
    "QuerySetupError",
    "WorldDataError",
    "PathReconstructionError",
    "ConfigError",
    "GridWorld",
    "VisibilityOracle",
    "Collider",
    "EMPTY",
    "SOLID",
    "GOAL_CONTACT",
]

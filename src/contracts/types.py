# core shared types: Coord, ActionType, PathNode, PathResult
# src/contracts/types.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# (x, y, z) integer grid coordinates; y is the vertical axis
Coord = Tuple[int, int, int]

# World-space position
Vec3 = Tuple[float, float, float]


class ActionType(Enum):
    """Action required to reach a cell from its predecessor."""

    WALK = "walk"
    JUMP = "jump"
    FALL = "fall"
    GAP_JUMP = "gap_jump"


class SearchStatus(Enum):
    """Lifecycle of a single search session."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SearchStatus.COMPLETED,
            SearchStatus.EXHAUSTED,
            SearchStatus.CANCELLED,
        )


@dataclass(frozen=True)
class PathNode:
    """
    A grid cell plus the action used to reach it.

    The action is metadata: queue and table bookkeeping are keyed by
    `coord` alone (see `key`).
    """

    coord: Coord
    action: ActionType = ActionType.WALK

    @property
    def key(self) -> Coord:
        return self.coord

    def __str__(self) -> str:
        return f"[{self.coord}, {self.action.name}]"


@dataclass(frozen=True)
class Waypoint:
    """One step of a reconstructed route."""

    coord: Coord
    position: Vec3
    action: ActionType
    cost: float  # cumulative best cost at this cell

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coord": list(self.coord),
            "position": list(self.position),
            "action": self.action.name,
            "cost": self.cost,
        }


@dataclass
class PathResult:
    """
    Route delivered to the query originator when a session finishes.

    Fields:

      - waypoints:
          Ordered start -> terminal, both inclusive.

      - status:
          COMPLETED when the goal was reached, EXHAUSTED when the frontier
          ran dry and the route ends at the closest node seen instead.

      - goal:
          The coordinate originally asked for. Compare against
          `waypoints[-1].coord` (or use `reached_goal`) to detect a
          degraded result.
    """

    waypoints: List[Waypoint]
    status: SearchStatus
    start: Coord
    goal: Coord
    expansions: int = 0

    @property
    def reached_goal(self) -> bool:
        return bool(self.waypoints) and self.waypoints[-1].coord == self.goal

    @property
    def total_cost(self) -> float:
        if not self.waypoints:
            return 0.0
        return self.waypoints[-1].cost

    @property
    def coords(self) -> List[Coord]:
        return [wp.coord for wp in self.waypoints]

    @property
    def actions(self) -> List[ActionType]:
        return [wp.action for wp in self.waypoints]

    @property
    def terminal(self) -> Optional[Coord]:
        return self.waypoints[-1].coord if self.waypoints else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view, used by the CLI and monitoring payloads."""
        return {
            "status": self.status.name,
            "start": list(self.start),
            "goal": list(self.goal),
            "reached_goal": self.reached_goal,
            "total_cost": self.total_cost,
            "expansions": self.expansions,
            "waypoints": [wp.to_dict() for wp in self.waypoints],
        }

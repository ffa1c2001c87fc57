# src/nav/heuristic.py
"""
Straightness-biased heuristic.

    h(c) = weight * (straightness * |cross(delta, start_goal_delta)|
                     + (1 - straightness) * sum(delta))

with delta = |c - goal| per axis and start_goal_delta = |start - goal|.

The cross term grows as a cell drifts away from the start-goal axis, which
discourages zig-zag routes. weight > 1 inflates the estimate to converge
faster; the heuristic is not admissible and is not meant to be.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from contracts.types import Coord, Vec3
from world.geometry import vec_cross, vec_length


def abs_delta(a: Coord, b: Coord) -> Vec3:
    return (
        float(abs(a[0] - b[0])),
        float(abs(a[1] - b[1])),
        float(abs(a[2] - b[2])),
    )


@dataclass
class StraightnessHeuristic:
    start: Coord
    goal: Coord
    straightness: float = 0.01
    weight: float = 1.05
    start_goal_delta: Vec3 = field(init=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.straightness <= 1.0:
            raise ValueError(f"straightness must be in [0, 1], got {self.straightness}")
        if self.weight < 1.0:
            raise ValueError(f"heuristic weight must be >= 1, got {self.weight}")
        self.start_goal_delta = abs_delta(self.start, self.goal)

    def __call__(self, coord: Coord) -> float:
        delta = abs_delta(coord, self.goal)
        cross = vec_length(vec_cross(delta, self.start_goal_delta))
        manhattan = delta[0] + delta[1] + delta[2]
        return self.weight * (
            self.straightness * cross + (1.0 - self.straightness) * manhattan
        )

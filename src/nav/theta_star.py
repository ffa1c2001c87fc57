# resumable Theta* search over a voxel GridWorld
# src/nav/theta_star.py
"""
Incremental any-angle (Theta*) pathfinding.

- Actions: WALK, JUMP, FALL, GAP_JUMP (see nav.neighbors).
- WALK relaxations try to hang the neighbor directly off the current
  node's parent when the visibility oracle confirms a straight line, which
  removes grid-aligned zig-zags from the route.
- JUMP / FALL / GAP_JUMP always chain from the current node and cost a
  fixed amount each.
- Work is sliced: step() performs at most `expansions_per_step` node
  expansions and returns, so a host tick loop can interleave it with
  other work. All state lives on the session object.

Closed set: a coordinate is settled the first time it receives a finite
cost (or is the start) and is never relaxed again. With
reopen_frontier=True, nodes still waiting in the frontier may have their
cost lowered; expanded nodes are never reopened in either mode. Together
with the inflated heuristic this trades optimality for speed.

If the frontier runs dry the route ends at the node closest to the goal
(by heuristic) seen during the search instead of failing.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from contracts.errors import QuerySetupError, WorldDataError
from contracts.types import ActionType, Coord, PathNode, PathResult, SearchStatus
from contracts.world import GridWorld, VisibilityOracle
from world.geometry import vec_distance

from .frontier import IndexedPriorityQueue
from .heuristic import StraightnessHeuristic
from .neighbors import NeighborGenerator
from .reconstruct import reconstruct_path
from .tables import CostTables

logger = logging.getLogger(__name__)

CompletionFn = Callable[[PathResult], None]

INF = math.inf


@dataclass(frozen=True)
class ActionCosts:
    """Fixed costs of the non-walking actions."""

    jump: float = 3.5
    fall: float = 1.5
    gap_jump: float = 4.0

    def __post_init__(self) -> None:
        for name in ("jump", "fall", "gap_jump"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} cost must be finite and >= 0, got {value}")

    def for_action(self, action: ActionType) -> float:
        if action is ActionType.JUMP:
            return self.jump
        if action is ActionType.FALL:
            return self.fall
        if action is ActionType.GAP_JUMP:
            return self.gap_jump
        raise ValueError(f"{action} has no fixed cost")


class ThetaStarSearch:
    """
    One start -> goal search session.

    Lifecycle: IDLE -> begin() -> RUNNING -> step()... -> COMPLETED or
    EXHAUSTED. cancel() moves to CANCELLED at any point. A finished
    session can be begun again; the cost arena is reused.

    The completion callback fires exactly once per begin(), with the
    reconstructed PathResult. Cancelled sessions deliver nothing.
    """

    def __init__(
        self,
        world: GridWorld,
        oracle: VisibilityOracle,
        *,
        costs: Optional[ActionCosts] = None,
        straightness: float = 0.01,
        heuristic_weight: float = 1.05,
        expansions_per_step: int = 2,
        reopen_frontier: bool = False,
        on_complete: Optional[CompletionFn] = None,
    ) -> None:
        if expansions_per_step < 1:
            raise ValueError(
                f"expansions_per_step must be >= 1, got {expansions_per_step}"
            )
        if not 0.0 <= straightness <= 1.0:
            raise ValueError(f"straightness must be in [0, 1], got {straightness}")
        if not math.isfinite(heuristic_weight) or heuristic_weight < 1.0:
            raise ValueError(f"heuristic_weight must be finite and >= 1, got {heuristic_weight}")

        self.world = world
        self.oracle = oracle
        self.costs = costs or ActionCosts()
        self.straightness = straightness
        self.heuristic_weight = heuristic_weight
        self.expansions_per_step = expansions_per_step
        self.reopen_frontier = reopen_frontier
        self.on_complete = on_complete
        self.session_id = uuid.uuid4().hex

        self._neighbors = NeighborGenerator(world)
        self._tables = CostTables(world.shape)
        self._frontier: IndexedPriorityQueue[PathNode] = IndexedPriorityQueue()

        self._status = SearchStatus.IDLE
        self._start: Optional[Coord] = None
        self._goal: Optional[Coord] = None
        self._heuristic: Optional[StraightnessHeuristic] = None
        self._closest: Optional[PathNode] = None
        self._closest_distance = INF
        self._expansions = 0
        self._result: Optional[PathResult] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._status is SearchStatus.RUNNING

    @property
    def result(self) -> Optional[PathResult]:
        return self._result

    @property
    def start(self) -> Optional[Coord]:
        return self._start

    @property
    def goal(self) -> Optional[Coord]:
        return self._goal

    @property
    def expansions(self) -> int:
        return self._expansions

    @property
    def tables(self) -> CostTables:
        return self._tables

    def begin(self, start: Coord, goal: Coord) -> SearchStatus:
        """Start a query (IDLE -> RUNNING, or straight to COMPLETED)."""
        if self._status is SearchStatus.RUNNING:
            raise RuntimeError("search session is already running; cancel it first")

        start = tuple(int(v) for v in start)  # type: ignore[assignment]
        goal = tuple(int(v) for v in goal)  # type: ignore[assignment]
        for role, coord in (("start", start), ("goal", goal)):
            if not self._tables.in_bounds(coord):
                raise QuerySetupError(
                    f"{role} {coord} is outside the grid {self._tables.shape}",
                    coord=coord,
                )

        self._tables.reset()
        self._frontier.clear()
        self._start = start
        self._goal = goal
        self._heuristic = StraightnessHeuristic(
            start=start,
            goal=goal,
            straightness=self.straightness,
            weight=self.heuristic_weight,
        )
        self._closest = None
        self._closest_distance = INF
        self._expansions = 0
        self._result = None

        start_node = PathNode(start, ActionType.WALK)
        self._tables.set_cost(start, 0.0)
        self._tables.set_parent(start, start_node)
        self._status = SearchStatus.RUNNING

        logger.info("Theta* search started: %s -> %s", start, goal)

        if start == goal:
            self._finish(SearchStatus.COMPLETED, start_node)
            return self._status

        self._frontier.insert(start_node, 0.0)
        return self._status

    def step(self) -> SearchStatus:
        """
        Advance by one batch of expansions.

        Returns RUNNING if more work remains, otherwise the terminal status.
        Calling step() on a session that is not running is a no-op.
        """
        if self._status is not SearchStatus.RUNNING:
            return self._status

        batch = 0
        while self._frontier:
            current = self._frontier.pop_min()
            self._expansions += 1
            batch += 1

            for neighbor in self._neighbors.adjacent(current.coord):
                if self._is_closed(neighbor.coord):
                    continue

                if not self._frontier.contains(neighbor):
                    # comparison sentinel so the first relaxation always wins
                    self._tables.set_cost(neighbor.coord, INF)

                if not self._relax(current, neighbor):
                    continue

                if neighbor.coord == self._goal:
                    self._finish(SearchStatus.COMPLETED, neighbor)
                    return self._status

                distance = self._heuristic(neighbor.coord)
                if distance < self._closest_distance:
                    self._closest_distance = distance
                    self._closest = neighbor

            if batch >= self.expansions_per_step:
                logger.debug(
                    "Theta* yielded after %d expansions (frontier=%d)",
                    self._expansions,
                    len(self._frontier),
                )
                return self._status

        # goal was not connected to the start; settle for the closest node
        fallback = self._closest or PathNode(self._start, ActionType.WALK)
        self._finish(SearchStatus.EXHAUSTED, fallback)
        return self._status

    def run(self) -> PathResult:
        """Drive step() until the session finishes and return the result."""
        if self._status is SearchStatus.IDLE:
            raise RuntimeError("call begin() before run()")
        while self._status is SearchStatus.RUNNING:
            self.step()
        if self._result is None:
            raise RuntimeError(f"search ended without a result ({self._status.name})")
        return self._result

    def cancel(self) -> None:
        """Discard an unfinished search. Safe at any time."""
        if self._status is SearchStatus.RUNNING:
            logger.info(
                "Theta* search cancelled after %d expansions: %s -> %s",
                self._expansions,
                self._start,
                self._goal,
            )
            self._status = SearchStatus.CANCELLED
            self._frontier.clear()

    # ------------------------------------------------------------------
    # Relaxation
    # ------------------------------------------------------------------

    def _is_closed(self, coord: Coord) -> bool:
        if coord == self._start:
            return True
        if not self._tables.has_cost(coord):
            return False
        if self.reopen_frontier:
            return not self._frontier.contains(PathNode(coord))
        return True

    def _relax(self, current: PathNode, neighbor: PathNode) -> bool:
        """
        Try to improve `neighbor` through `current` (or its parent).

        Returns False when the neighbor is ineligible because the world
        could not supply a usable terrain cost.
        """
        if neighbor.action is ActionType.WALK:
            terrain = self._terrain_cost(neighbor.coord)
            if terrain is None:
                return False

            grandparent = self._tables.parent(current.coord)
            if grandparent is not None and self.oracle.has_line_of_sight(
                grandparent.coord, neighbor.coord
            ):
                via = grandparent
            else:
                via = current

            cost = (
                self._tables.cost(via.coord)
                + self._distance(via.coord, neighbor.coord)
                + terrain
            )
        else:
            via = current
            cost = self._tables.cost(current.coord) + self.costs.for_action(neighbor.action)

        self._try_set(neighbor, via, cost)
        return True

    def _try_set(self, neighbor: PathNode, via: PathNode, cost: float) -> None:
        if cost < self._tables.cost(neighbor.coord):
            self._tables.set_cost(neighbor.coord, cost)
            self._tables.set_parent(neighbor.coord, via)
            priority = cost + self._heuristic(neighbor.coord)
            self._frontier.decrease_or_insert(neighbor, priority)

    def _terrain_cost(self, coord: Coord) -> Optional[float]:
        try:
            value = float(self.world.terrain_cost(coord))
        except (WorldDataError, LookupError, TypeError, ValueError) as exc:
            logger.debug("terrain cost unavailable at %s: %r", coord, exc)
            return None
        if not math.isfinite(value) or value < 0:
            logger.debug("terrain cost at %s is unusable: %r", coord, value)
            return None
        return value

    def _distance(self, a: Coord, b: Coord) -> float:
        return vec_distance(self.world.to_world(a), self.world.to_world(b))

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _finish(self, status: SearchStatus, terminal: PathNode) -> None:
        waypoints = reconstruct_path(self._tables, self.world, self._start, terminal)
        self._status = status
        self._frontier.clear()
        self._result = PathResult(
            waypoints=waypoints,
            status=status,
            start=self._start,
            goal=self._goal,
            expansions=self._expansions,
        )

        if status is SearchStatus.COMPLETED:
            logger.info(
                "Theta* reached goal %s: %d waypoints, cost %.3f, %d expansions, %d cells discovered",
                self._goal,
                len(waypoints),
                self._result.total_cost,
                self._expansions,
                self._tables.discovered_count(),
            )
        else:
            logger.info(
                "Theta* exhausted frontier; goal %s unreachable, "
                "falling back to %s (%d waypoints, %d expansions, %d cells discovered)",
                self._goal,
                terminal.coord,
                len(waypoints),
                self._expansions,
                self._tables.discovered_count(),
            )

        if self.on_complete is not None:
            try:
                self.on_complete(self._result)
            except Exception:
                logger.exception("path completion callback raised")
                raise


def find_path(
    world: GridWorld,
    oracle: VisibilityOracle,
    start: Coord,
    goal: Coord,
    **options,
) -> PathResult:
    """
    Run a whole search synchronously.

    Convenience for tools and tests; keyword options are passed to
    ThetaStarSearch.
    """
    search = ThetaStarSearch(world, oracle, **options)
    search.begin(start, goal)
    return search.run()

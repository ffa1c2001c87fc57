# query entry point wiring world, oracle, config and monitoring
# src/nav/service.py
"""
PathfindingService: the caller-facing surface of the pathfinder.

- find_path(start, goal, on_complete) -> session handle (already running,
  registered with the service's scheduler)
- find_path_between(start_pos, goal_pos, ...) -> same, after query setup
  from world positions
- tick() -> advance every active session by one batch

When constructed with an EventBus it publishes SEARCH_STARTED,
PATH_COMPLETED / PATH_EXHAUSTED, SEARCH_CANCELLED and QUERY_REJECTED
events, correlated per session.

The world and the oracle are injected; sessions share them read-only.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from contracts.errors import QuerySetupError
from contracts.types import Coord, PathResult, SearchStatus, Vec3
from contracts.world import GridWorld, VisibilityOracle
from env.schema import PathfindingProfile, SearchConfig, VisibilityConfig
from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import log_event
from world.collision import VoxelCollider
from world.grid import VoxelGrid
from world.query import DEFAULT_CONTACT_SCAN_HEIGHT, resolve_query, validate_endpoint
from world.visibility import LineOfSightOracle

from .scheduler import SearchScheduler
from .theta_star import ActionCosts, CompletionFn, ThetaStarSearch

logger = logging.getLogger(__name__)

MODULE = "nav.service"


def build_oracle(grid: VoxelGrid, visibility: VisibilityConfig) -> LineOfSightOracle:
    """Standard oracle for a VoxelGrid: voxel collider + ground check."""
    return LineOfSightOracle(
        world=grid,
        layout=grid.layout,
        collider=VoxelCollider(world=grid, layout=grid.layout),
        cast_radius=visibility.cast_radius,
        clearance=visibility.clearance,
        sample_radius=visibility.sample_radius,
    )


class PathfindingService:
    def __init__(
        self,
        world: GridWorld,
        oracle: VisibilityOracle,
        search: Optional[SearchConfig] = None,
        *,
        bus: Optional[EventBus] = None,
        scheduler: Optional[SearchScheduler] = None,
    ) -> None:
        self.world = world
        self.oracle = oracle
        self.search = search or SearchConfig()
        self.bus = bus
        self.scheduler = scheduler or SearchScheduler()

    @classmethod
    def from_profile(
        cls,
        grid: VoxelGrid,
        profile: PathfindingProfile,
        *,
        bus: Optional[EventBus] = None,
    ) -> "PathfindingService":
        """Wire a service for a VoxelGrid from a loaded config profile."""
        return cls(
            world=grid,
            oracle=build_oracle(grid, profile.visibility),
            search=profile.search,
            bus=bus,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def new_session(self, on_complete: Optional[CompletionFn] = None) -> ThetaStarSearch:
        """Build an idle session configured from this service's settings."""
        cfg = self.search
        session = ThetaStarSearch(
            self.world,
            self.oracle,
            costs=ActionCosts(
                jump=cfg.jump_cost,
                fall=cfg.fall_cost,
                gap_jump=cfg.gap_jump_cost,
            ),
            straightness=cfg.straightness,
            heuristic_weight=cfg.heuristic_weight,
            expansions_per_step=cfg.expansions_per_step,
            reopen_frontier=cfg.reopen_frontier,
        )
        session.on_complete = self._make_delivery(session.session_id, on_complete)
        return session

    def find_path(
        self,
        start: Coord,
        goal: Coord,
        on_complete: Optional[CompletionFn] = None,
    ) -> ThetaStarSearch:
        """
        Begin a search and register it with the scheduler.

        The returned session is RUNNING (or already COMPLETED when
        start == goal, in which case on_complete has already fired).
        Endpoints that are not standable terrain raise QuerySetupError
        before any search state is created.
        """
        try:
            validate_endpoint(self.world, start, "start")
            validate_endpoint(self.world, goal, "goal")
        except QuerySetupError as exc:
            self._reject(exc, {"start": list(start), "goal": list(goal)})
            raise

        session = self.new_session(on_complete)
        self._emit(
            EventType.SEARCH_STARTED,
            "Search started",
            {"start": list(start), "goal": list(goal)},
            session.session_id,
        )
        session.begin(start, goal)
        self.scheduler.submit(session)
        return session

    def find_path_between(
        self,
        start_position: Vec3,
        goal_position: Vec3,
        on_complete: Optional[CompletionFn] = None,
        max_height: int = DEFAULT_CONTACT_SCAN_HEIGHT,
    ) -> ThetaStarSearch:
        """
        Query setup from world positions, then find_path.

        Raises QuerySetupError (and publishes QUERY_REJECTED) when either
        endpoint has no usable goal-contact surface.
        """
        try:
            start, goal = resolve_query(self.world, start_position, goal_position, max_height)
        except QuerySetupError as exc:
            self._reject(
                exc,
                {
                    "start_position": list(start_position),
                    "goal_position": list(goal_position),
                },
            )
            raise
        return self.find_path(start, goal, on_complete)

    # ------------------------------------------------------------------
    # Host loop
    # ------------------------------------------------------------------

    def tick(self) -> int:
        """Advance every active session by one batch."""
        return self.scheduler.tick()

    def run_until_idle(self, max_ticks: Optional[int] = None) -> int:
        return self.scheduler.run_until_idle(max_ticks)

    def cancel(self, session: ThetaStarSearch) -> None:
        was_running = session.is_running
        self.scheduler.cancel(session)
        if was_running:
            self._emit(
                EventType.SEARCH_CANCELLED,
                "Search cancelled",
                {
                    "start": list(session.start),
                    "goal": list(session.goal),
                    "expansions": session.expansions,
                },
                session.session_id,
            )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _make_delivery(
        self,
        correlation_id: str,
        on_complete: Optional[CompletionFn],
    ) -> CompletionFn:
        def deliver(result: PathResult) -> None:
            if result.status is SearchStatus.COMPLETED:
                event_type, message = EventType.PATH_COMPLETED, "Path completed"
            else:
                event_type, message = EventType.PATH_EXHAUSTED, "Goal unreachable; closest path"
            self._emit(
                event_type,
                message,
                {
                    "start": list(result.start),
                    "goal": list(result.goal),
                    "terminal": list(result.terminal) if result.terminal else None,
                    "reached_goal": result.reached_goal,
                    "total_cost": result.total_cost,
                    "waypoints": len(result.waypoints),
                    "expansions": result.expansions,
                },
                correlation_id,
            )
            if on_complete is not None:
                on_complete(result)

        return deliver

    def _reject(self, exc: QuerySetupError, payload: Dict) -> None:
        logger.warning("query rejected: %s", exc)
        payload = dict(payload)
        payload["coord"] = list(exc.coord) if exc.coord is not None else None
        self._emit(EventType.QUERY_REJECTED, str(exc), payload)

    def _emit(
        self,
        event_type: EventType,
        message: str,
        payload: Dict,
        correlation_id: Optional[str] = None,
    ) -> None:
        if self.bus is None:
            return
        log_event(
            bus=self.bus,
            module=MODULE,
            event_type=event_type,
            message=message,
            payload=payload,
            correlation_id=correlation_id,
        )

# tests/test_nav_service.py
"""
Tests for nav.service.PathfindingService.

Covers:
- query validation before any search state exists
- monitoring events per session lifecycle
- world-position queries through goal-contact resolution
- wiring from a config profile
"""

from __future__ import annotations

from typing import List

import pytest

from contracts.errors import QuerySetupError
from contracts.types import PathResult, SearchStatus
from env.schema import PathfindingProfile, SearchConfig
from monitoring.bus import EventBus
from monitoring.events import EventType, MonitoringEvent
from nav.service import PathfindingService, build_oracle
from testing.fakes import FakeOracle
from testing.worlds import contact_row, flat_row
from world.visibility import LineOfSightOracle


def make_service(grid, per_step: int = 2, oracle=None):
    bus = EventBus()
    events: List[MonitoringEvent] = []
    bus.subscribe(events.append)
    service = PathfindingService(
        world=grid,
        oracle=oracle or FakeOracle(),
        search=SearchConfig(expansions_per_step=per_step),
        bus=bus,
    )
    return service, events


def test_find_path_completes_and_publishes_events():
    service, events = make_service(flat_row(6))
    delivered: List[PathResult] = []

    session = service.find_path((0, 0, 0), (5, 0, 0), delivered.append)
    assert session.is_running
    service.run_until_idle()

    assert [e.event_type for e in events] == [EventType.SEARCH_STARTED, EventType.PATH_COMPLETED]
    assert {e.correlation_id for e in events} == {session.session_id}
    assert all(e.module == "nav.service" for e in events)

    done = events[-1].payload
    assert done["reached_goal"] is True
    assert done["goal"] == [5, 0, 0]
    assert done["terminal"] == [5, 0, 0]
    assert len(delivered) == 1
    assert delivered[0] is session.result


def test_unreachable_goal_publishes_exhausted():
    grid = flat_row(6)
    grid.set_cell((2, 0, 0), 0)
    grid.set_cell((3, 0, 0), 0)
    service, events = make_service(grid)

    service.find_path((0, 0, 0), (5, 0, 0))
    service.run_until_idle()

    assert events[-1].event_type is EventType.PATH_EXHAUSTED
    assert events[-1].payload["reached_goal"] is False
    assert events[-1].payload["terminal"] == [1, 0, 0]


def test_trivial_query_completes_inside_find_path():
    service, events = make_service(flat_row(4))
    session = service.find_path((2, 0, 0), (2, 0, 0))

    assert session.status is SearchStatus.COMPLETED
    assert len(service.scheduler) == 0
    assert [e.event_type for e in events] == [EventType.SEARCH_STARTED, EventType.PATH_COMPLETED]


@pytest.mark.parametrize(
    "start, goal, bad",
    [
        ((0, 1, 0), (3, 0, 0), (0, 1, 0)),   # air
        ((0, 0, 0), (9, 0, 0), (9, 0, 0)),   # outside the grid
    ],
)
def test_invalid_endpoints_are_rejected(start, goal, bad):
    service, events = make_service(flat_row(4))

    with pytest.raises(QuerySetupError) as exc_info:
        service.find_path(start, goal)

    assert exc_info.value.coord == bad
    assert [e.event_type for e in events] == [EventType.QUERY_REJECTED]
    assert events[0].payload["coord"] == list(bad)
    assert len(service.scheduler) == 0


def test_covered_endpoint_is_rejected():
    grid = flat_row(4)
    grid.set_cell((3, 1, 0))
    service, _ = make_service(grid)
    with pytest.raises(QuerySetupError):
        service.find_path((0, 0, 0), (3, 0, 0))


def test_find_path_between_resolves_goal_contact_cells():
    service, events = make_service(contact_row(5))

    session = service.find_path_between((0.2, 4.0, 0.1), (3.9, 0.0, -0.2))
    service.run_until_idle()

    assert session.start == (0, 0, 0)
    assert session.goal == (4, 0, 0)
    assert session.result.reached_goal


def test_find_path_between_without_contact_surface_is_rejected():
    service, events = make_service(flat_row(5))  # plain solid, no goal contact

    with pytest.raises(QuerySetupError):
        service.find_path_between((0.0, 0.0, 0.0), (4.0, 0.0, 0.0))
    assert [e.event_type for e in events] == [EventType.QUERY_REJECTED]
    assert "start_position" in events[0].payload


def test_cancel_publishes_once():
    service, events = make_service(flat_row(30), per_step=1)
    session = service.find_path((0, 0, 0), (29, 0, 0))
    service.tick()

    service.cancel(session)
    service.cancel(session)

    assert session.status is SearchStatus.CANCELLED
    assert len(service.scheduler) == 0
    kinds = [e.event_type for e in events]
    assert kinds == [EventType.SEARCH_STARTED, EventType.SEARCH_CANCELLED]
    assert events[-1].payload["expansions"] == 1


def test_concurrent_sessions_share_the_world():
    service, events = make_service(flat_row(12), per_step=1)
    a = service.find_path((0, 0, 0), (11, 0, 0))
    b = service.find_path((11, 0, 0), (0, 0, 0))
    assert len(service.scheduler) == 2

    service.run_until_idle()

    assert a.result.reached_goal and b.result.reached_goal
    assert a.result.coords == list(reversed(b.result.coords))
    completed = [e.correlation_id for e in events if e.event_type is EventType.PATH_COMPLETED]
    assert sorted(completed) == sorted([a.session_id, b.session_id])


def test_service_without_bus_still_works():
    service = PathfindingService(world=flat_row(4), oracle=FakeOracle())
    session = service.find_path((0, 0, 0), (3, 0, 0))
    service.run_until_idle()
    assert session.result.reached_goal


def test_from_profile_uses_profile_settings():
    grid = flat_row(5)
    profile = PathfindingProfile(name="test", search=SearchConfig(expansions_per_step=7, jump_cost=2.0))
    service = PathfindingService.from_profile(grid, profile)

    assert isinstance(service.oracle, LineOfSightOracle)
    session = service.new_session()
    assert session.expansions_per_step == 7
    assert session.costs.jump == 2.0


def test_build_oracle_uses_visibility_settings():
    grid = flat_row(5)
    profile = PathfindingProfile(name="test")
    profile.visibility.cast_radius = 0.2
    oracle = build_oracle(grid, profile.visibility)

    assert oracle.cast_radius == 0.2
    assert oracle.sample_radius == pytest.approx(0.1)
    assert oracle.has_line_of_sight((0, 0, 0), (4, 0, 0))

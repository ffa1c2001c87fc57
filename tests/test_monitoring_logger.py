# tests/test_monitoring_logger.py
"""
Tests for monitoring.logger.JsonFileLogger and log_event.

Covers:
- JSON structure validity
- Correct field encoding
- Flush behavior (file actually gets data)
- Search lifecycle events written end to end
"""

from __future__ import annotations

import json
from pathlib import Path

from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import JsonFileLogger, log_event
from nav.service import PathfindingService
from testing.fakes import FakeOracle
from testing.worlds import flat_row


def read_lines(path: Path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def test_json_file_logger_writes_valid_json(tmp_path: Path):
    bus = EventBus()
    log_path = tmp_path / "events.log"

    logger = JsonFileLogger(log_path, bus)

    log_event(
        bus=bus,
        module="nav.service",
        event_type=EventType.SEARCH_STARTED,
        message="Search started",
        payload={"start": [0, 1, 0], "goal": [4, 1, 2]},
        correlation_id="session-123",
    )

    # Explicit close to ensure file handle is flushed
    logger.close()

    lines = read_lines(log_path)
    assert len(lines) == 1

    data = lines[0]
    assert data["module"] == "nav.service"
    assert data["event_type"] == "SEARCH_STARTED"
    assert data["message"] == "Search started"
    assert data["payload"]["start"] == [0, 1, 0]
    assert data["payload"]["goal"] == [4, 1, 2]
    assert data["correlation_id"] == "session-123"
    assert isinstance(data["ts"], (int, float))


def test_logger_parent_dir_created(tmp_path: Path):
    log_path = tmp_path / "nested" / "logs" / "events.log"

    bus = EventBus()
    with JsonFileLogger(log_path, bus) as sink:
        assert sink.path == log_path
        log_event(bus=bus, module="cli", event_type=EventType.LOG, message="hello")

    assert log_path.exists()
    assert read_lines(log_path)[0]["payload"] == {}


def test_closed_logger_stops_receiving(tmp_path: Path):
    bus = EventBus()
    log_path = tmp_path / "events.log"
    JsonFileLogger(log_path, bus).close()

    log_event(bus=bus, module="cli", event_type=EventType.LOG, message="late")
    assert log_path.read_text(encoding="utf-8") == ""


def test_search_lifecycle_is_logged(tmp_path: Path):
    bus = EventBus()
    log_path = tmp_path / "events.log"
    sink = JsonFileLogger(log_path, bus)

    service = PathfindingService(world=flat_row(5), oracle=FakeOracle(), bus=bus)
    session = service.find_path((0, 0, 0), (4, 0, 0))
    service.run_until_idle()
    sink.close()

    lines = read_lines(log_path)
    assert [l["event_type"] for l in lines] == ["SEARCH_STARTED", "PATH_COMPLETED"]
    assert all(l["correlation_id"] == session.session_id for l in lines)
    assert lines[-1]["payload"]["terminal"] == [4, 0, 0]

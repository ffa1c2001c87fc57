# src/monitoring/__init__.py
"""Search lifecycle events: bus, event schema, JSONL sink."""

from __future__ import annotations

from .events import EventType, MonitoringEvent
from .bus import EventBus
from .logger import JsonFileLogger, log_event

__all__ = ["EventType", "MonitoringEvent", "EventBus", "JsonFileLogger", "log_event"]

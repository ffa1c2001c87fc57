# path: src/monitoring/events.py
"""
Event schemas for pathfinding monitoring.

This module defines:
- EventType enum
- MonitoringEvent (structured search lifecycle events)

All events are JSON-serializable via `.to_dict()` and are intended
for use with monitoring.bus.EventBus and monitoring.logger.JsonFileLogger.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by the pathfinding service."""

    # A query was accepted and its session began running
    SEARCH_STARTED = auto()

    # Session finished at the goal
    PATH_COMPLETED = auto()

    # Frontier ran dry; path ends at the closest node instead
    PATH_EXHAUSTED = auto()

    # Session discarded before finishing
    SEARCH_CANCELLED = auto()

    # Query setup rejected the endpoints before any search
    QUERY_REJECTED = auto()

    # Generic log messages
    LOG = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Runtime event emitted by the pathfinding service or tools.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("nav.service", "cli", etc.)
    event_type: EventType       # Enum describing the event class
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (endpoints, path summary)
    correlation_id: Optional[str] = None  # Groups events of one search session

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name  # store name, not enum
        return data

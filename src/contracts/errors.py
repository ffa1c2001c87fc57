# src/contracts/errors.py
"""
Exception hierarchy for the pathfinding core.

An unreachable goal is NOT an error: the engine falls back to the closest
node it saw. Exceptions are reserved for bad queries, broken configuration
and internal bookkeeping faults.
"""

from __future__ import annotations

from typing import Optional

from .types import Coord


class PathfindingError(Exception):
    """Base class for everything raised by this package."""


class QuerySetupError(PathfindingError):
    """Start or goal cannot be used for a search (raised before searching)."""

    def __init__(self, message: str, coord: Optional[Coord] = None) -> None:
        super().__init__(message)
        self.coord = coord


class WorldDataError(PathfindingError):
    """A collaborator could not provide data for a coordinate."""


class PathReconstructionError(PathfindingError):
    """The parent chain could not be walked back to the start."""


class ConfigError(PathfindingError, ValueError):
    """Invalid YAML configuration or level file."""

# src/env/__init__.py
"""YAML configuration for the pathfinder."""

from __future__ import annotations

from .schema import LayoutConfig, SearchConfig, VisibilityConfig, PathfindingProfile
from .loader import load_pathfinding_config, parse_profile

__all__ = [
    "LayoutConfig",
    "SearchConfig",
    "VisibilityConfig",
    "PathfindingProfile",
    "load_pathfinding_config",
    "parse_profile",
]

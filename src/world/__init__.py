# src/world/__init__.py
"""
World-side collaborators of the pathfinder.

Provides:
- VoxelGrid: dense occupancy / terrain-cost grid (GridWorld)
- SquareLayout / HexLayout: coordinate <-> world mapping
- VoxelCollider + LineOfSightOracle: visibility queries
- goal_contact / resolve_query: query setup and endpoint validation
- load_level: YAML level files
"""

from __future__ import annotations

from .layout import GridLayout, SquareLayout, HexLayout, make_layout
from .grid import VoxelGrid
from .collision import VoxelCollider
from .visibility import LineOfSightOracle
from .query import goal_contact, validate_endpoint, resolve_query, is_standable
from .loader import Level, load_level, parse_level, grid_from_layers

__all__ = [
    "GridLayout",
    "SquareLayout",
    "HexLayout",
    "make_layout",
    "VoxelGrid",
    "VoxelCollider",
    "LineOfSightOracle",
    "goal_contact",
    "validate_endpoint",
    "resolve_query",
    "is_standable",
    "Level",
    "load_level",
    "parse_level",
    "grid_from_layers",
]

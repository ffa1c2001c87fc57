# src/testing/__init__.py

"""
Fakes for pathfinding tests.

- FakeOracle / FakeCollider: fixed-answer visibility collaborators
- FlakyWorld: wraps a real grid and makes chosen lookups fail
- flat_row, gap_row, stairs, ...: hand-built grids
"""

from .fakes import FakeCollider, FakeOracle, FlakyWorld
from .worlds import contact_row, flat_floor, flat_row, gap_row, stairs

__all__ = [
    "FakeCollider",
    "FakeOracle",
    "FlakyWorld",
    "contact_row",
    "flat_floor",
    "flat_row",
    "gap_row",
    "stairs",
]

# src/nav/tables.py
"""
CostTables: best-known cost and parent per coordinate.

Storage is a dense numpy arena shaped like the grid, so lookups are plain
array indexing and resetting between sessions is a bulk fill.

Invariant: parent(c) is only meaningful while cost(c) is finite.
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from contracts.types import ActionType, Coord, PathNode

# Stable small-int codes for the parent action arena
_ACTION_CODES: List[ActionType] = list(ActionType)
_CODE_OF = {action: code for code, action in enumerate(_ACTION_CODES)}
_NO_PARENT = -1


class CostTables:
    def __init__(self, shape: Tuple[int, int, int]) -> None:
        self.shape = tuple(int(s) for s in shape)
        self._cost = np.full(self.shape, np.inf, dtype=np.float64)
        self._parent_coord = np.full(self.shape + (3,), _NO_PARENT, dtype=np.int32)
        self._parent_action = np.full(self.shape, _NO_PARENT, dtype=np.int8)

    def reset(self) -> None:
        """Bulk-clear the arena for a new session."""
        self._cost.fill(np.inf)
        self._parent_coord.fill(_NO_PARENT)
        self._parent_action.fill(_NO_PARENT)

    def in_bounds(self, coord: Coord) -> bool:
        x, y, z = coord
        sx, sy, sz = self.shape
        return 0 <= x < sx and 0 <= y < sy and 0 <= z < sz

    def _check(self, coord: Coord) -> Coord:
        # numpy would silently wrap negative indices
        if not self.in_bounds(coord):
            raise IndexError(f"coord {coord} outside cost table of shape {self.shape}")
        return coord

    # ------------------------------------------------------------------
    # Cost
    # ------------------------------------------------------------------

    def cost(self, coord: Coord) -> float:
        return float(self._cost[self._check(coord)])

    def set_cost(self, coord: Coord, value: float) -> None:
        self._cost[self._check(coord)] = value

    def has_cost(self, coord: Coord) -> bool:
        return math.isfinite(self.cost(coord))

    # ------------------------------------------------------------------
    # Parent
    # ------------------------------------------------------------------

    def parent(self, coord: Coord) -> Optional[PathNode]:
        code = int(self._parent_action[self._check(coord)])
        if code == _NO_PARENT:
            return None
        px, py, pz = (int(v) for v in self._parent_coord[coord])
        return PathNode((px, py, pz), _ACTION_CODES[code])

    def set_parent(self, coord: Coord, node: PathNode) -> None:
        self._check(coord)
        self._parent_coord[coord] = node.coord
        self._parent_action[coord] = _CODE_OF[node.action]

    def discovered_count(self) -> int:
        return int(np.isfinite(self._cost).sum())

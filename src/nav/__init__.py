# src/nav/__init__.py
"""
Any-angle (Theta*) pathfinding over voxel worlds.

Provides:
- ThetaStarSearch: resumable search session (begin / step / run / cancel)
- find_path: run a whole search synchronously
- PathfindingService: query entry point with scheduling and monitoring
- SearchScheduler / ThreadedSearchRunner: ways to drive sessions
- IndexedPriorityQueue, CostTables, NeighborGenerator, StraightnessHeuristic
"""

from __future__ import annotations

from .frontier import IndexedPriorityQueue
from .tables import CostTables
from .neighbors import NeighborGenerator
from .heuristic import StraightnessHeuristic
from .reconstruct import reconstruct_path
from .theta_star import ActionCosts, ThetaStarSearch, find_path
from .scheduler import SearchScheduler, ThreadedSearchRunner
from .service import PathfindingService, build_oracle

__all__ = [
    "IndexedPriorityQueue",
    "CostTables",
    "NeighborGenerator",
    "StraightnessHeuristic",
    "reconstruct_path",
    "ActionCosts",
    "ThetaStarSearch",
    "find_path",
    "SearchScheduler",
    "ThreadedSearchRunner",
    "PathfindingService",
    "build_oracle",
]

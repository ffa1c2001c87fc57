# src/nav/reconstruct.py
"""Walk the parent table from a terminal node back to the start."""

from __future__ import annotations

from typing import List

from contracts.errors import PathReconstructionError
from contracts.types import Coord, PathNode, Waypoint
from contracts.world import GridWorld

from .tables import CostTables


def reconstruct_path(
    tables: CostTables,
    world: GridWorld,
    start: Coord,
    terminal: PathNode,
) -> List[Waypoint]:
    """
    Return waypoints ordered start -> terminal (both inclusive).

    Each waypoint carries the action used to reach its cell and the best
    cost recorded for it.
    """
    sx, sy, sz = tables.shape
    max_len = sx * sy * sz  # a simple path can't visit more cells than exist

    path: List[Waypoint] = []
    cur = terminal
    while True:
        cost = tables.cost(cur.coord)
        if cost == float("inf"):
            raise PathReconstructionError(f"{cur.coord} has no recorded cost")
        path.append(Waypoint(cur.coord, world.to_world(cur.coord), cur.action, cost))
        if cur.coord == start:
            break
        if len(path) > max_len:
            raise PathReconstructionError(
                f"parent chain from {terminal.coord} does not reach {start}"
            )

        parent = tables.parent(cur.coord)
        if parent is None:
            raise PathReconstructionError(f"{cur.coord} has no parent")
        cur = parent

    path.reverse()
    return path

# collaborator interfaces consumed by the search engine
# src/contracts/world.py

from __future__ import annotations

from typing import Protocol, Sequence, Tuple

from .types import Coord, Vec3

# Occupancy values
EMPTY = 0
SOLID = 1
GOAL_CONTACT = 2  # solid surface that marks a query endpoint


class GridWorld(Protocol):
    """
    Read-only voxel world.

    Implementations must never be mutated while a search session holds
    them; several sessions may share one instance.
    """

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Grid bounds (size_x, size_y, size_z); valid coords start at 0."""
        ...

    @property
    def lateral_directions(self) -> Sequence[Coord]:
        """Planar adjacency offsets (dy is always 0)."""
        ...

    def occupancy(self, coord: Coord) -> int:
        """0 = empty, > 0 = solid terrain. Out of bounds reads as empty."""
        ...

    def terrain_cost(self, coord: Coord) -> float:
        """Per-cell movement penalty (>= 0)."""
        ...

    def to_world(self, coord: Coord) -> Vec3:
        ...

    def nearest_coord(self, position: Vec3) -> Coord:
        ...


class VisibilityOracle(Protocol):
    """Answers whether an agent can travel in a straight line."""

    def has_line_of_sight(self, from_coord: Coord, to_coord: Coord) -> bool:
        ...


class Collider(Protocol):
    """Geometric obstruction queries (stand-in for a physics engine)."""

    def sphere_cast(
        self,
        origin: Vec3,
        direction: Vec3,
        radius: float,
        max_distance: float,
    ) -> bool:
        """Return True if the swept sphere hits anything."""
        ...

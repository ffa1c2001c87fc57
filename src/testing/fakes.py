# src/testing/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Set, Tuple

from contracts.errors import WorldDataError
from contracts.types import Coord, Vec3
from contracts.world import GridWorld


# --- Fake visibility ---------------------------------------------------------

@dataclass
class FakeOracle:
    """
    Visibility oracle with a fixed answer.

    Records every (from, to) query so tests can assert how often the
    engine asked for line of sight.
    """
    answer: bool = True
    calls: List[Tuple[Coord, Coord]] = field(default_factory=list)

    def has_line_of_sight(self, from_coord: Coord, to_coord: Coord) -> bool:
        self.calls.append((from_coord, to_coord))
        return self.answer


@dataclass
class FakeCollider:
    """Collider that reports a hit whenever `hit` is set; records casts."""
    hit: bool = False
    casts: List[Tuple[Vec3, Vec3, float, float]] = field(default_factory=list)

    def sphere_cast(self, origin: Vec3, direction: Vec3, radius: float, max_distance: float) -> bool:
        self.casts.append((origin, direction, radius, max_distance))
        return self.hit


# --- Fake world --------------------------------------------------------------

@dataclass
class FlakyWorld:
    """
    Wraps a real GridWorld and breaks selected lookups.

    - occupancy() raises WorldDataError for coords in `broken_occupancy`
    - terrain_cost() returns `terrain_override(coord)` when it yields a
      value, and raises WorldDataError for coords in `broken_terrain`
    """
    inner: GridWorld
    broken_occupancy: Set[Coord] = field(default_factory=set)
    broken_terrain: Set[Coord] = field(default_factory=set)
    terrain_override: Optional[Callable[[Coord], Optional[Any]]] = None

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.inner.shape

    @property
    def lateral_directions(self):
        return self.inner.lateral_directions

    def occupancy(self, coord: Coord) -> int:
        if coord in self.broken_occupancy:
            raise WorldDataError(f"occupancy unavailable at {coord}")
        return self.inner.occupancy(coord)

    def terrain_cost(self, coord: Coord) -> float:
        if coord in self.broken_terrain:
            raise WorldDataError(f"terrain cost unavailable at {coord}")
        if self.terrain_override is not None:
            value = self.terrain_override(coord)
            if value is not None:
                return value
        return self.inner.terrain_cost(coord)

    def to_world(self, coord: Coord) -> Vec3:
        return self.inner.to_world(coord)

    def nearest_coord(self, position: Vec3) -> Coord:
        return self.inner.nearest_coord(position)

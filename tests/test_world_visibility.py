# tests/test_world_visibility.py
"""
Tests for world.collision.VoxelCollider and world.visibility.LineOfSightOracle.

Covers:
- sphere casts against solid cells
- the two line-of-sight checks (ground continuity and clearance)
- fail-closed behavior
"""

from __future__ import annotations

import pytest

from contracts.world import EMPTY, SOLID
from testing.fakes import FakeCollider, FlakyWorld
from testing.worlds import flat_floor, flat_row
from world.collision import VoxelCollider
from world.geometry import sphere_intersects_box
from world.grid import VoxelGrid
from world.layout import HexLayout, SquareLayout
from world.visibility import LineOfSightOracle


def oracle_for(grid: VoxelGrid, **kwargs) -> LineOfSightOracle:
    return LineOfSightOracle(
        world=grid,
        layout=grid.layout,
        collider=VoxelCollider(world=grid, layout=grid.layout),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Geometry / collider
# ---------------------------------------------------------------------------


def test_sphere_box_overlap_counts_touching():
    box = ((0.0, 0.0, 0.0), (0.5, 0.5, 0.5))
    assert sphere_intersects_box((0.0, 1.0, 0.0), 0.5, *box)
    assert not sphere_intersects_box((0.0, 1.0625, 0.0), 0.5, *box)
    assert sphere_intersects_box((0.1, 0.1, 0.1), 0.05, *box)  # inside


def test_sphere_cast_hits_wall_in_the_way():
    grid = VoxelGrid.empty(5, 3, 1)
    grid.set_cell((2, 1, 0), SOLID)
    collider = VoxelCollider(world=grid, layout=grid.layout)

    assert collider.sphere_cast((0.0, 1.0, 0.0), (1.0, 0.0, 0.0), 0.3, 4.0)
    # stopping short of the wall
    assert not collider.sphere_cast((0.0, 1.0, 0.0), (1.0, 0.0, 0.0), 0.3, 1.0)
    # passing above it
    assert not collider.sphere_cast((0.0, 2.0, 0.0), (1.0, 0.0, 0.0), 0.3, 4.0)


def test_zero_length_cast_is_an_overlap_test():
    grid = VoxelGrid.empty(3, 3, 3)
    grid.set_cell((1, 1, 1), SOLID)
    collider = VoxelCollider(world=grid, layout=grid.layout)

    assert collider.sphere_cast((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), 0.3, 0.0)
    assert not collider.sphere_cast((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 0.3, 0.0)


def test_sphere_cast_rejects_bad_radius():
    grid = VoxelGrid.empty(2, 2, 2)
    collider = VoxelCollider(world=grid, layout=grid.layout)
    with pytest.raises(ValueError):
        collider.sphere_cast((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), 0.0, 1.0)


# ---------------------------------------------------------------------------
# Line of sight
# ---------------------------------------------------------------------------


def test_open_floor_has_line_of_sight():
    grid = flat_floor(6, 6)
    oracle = oracle_for(grid)
    assert oracle.has_line_of_sight((0, 0, 0), (5, 0, 5))
    assert oracle.has_line_of_sight((5, 0, 0), (0, 0, 3))


def test_hole_in_the_floor_blocks():
    grid = flat_row(5)
    grid.set_cell((2, 0, 0), EMPTY)
    assert not oracle_for(grid).has_line_of_sight((0, 0, 0), (4, 0, 0))


def test_hole_beside_the_line_does_not_block():
    grid = flat_floor(5, 3)
    grid.set_cell((2, 0, 2), EMPTY)
    assert oracle_for(grid).has_line_of_sight((0, 0, 0), (4, 0, 0))


def test_obstacle_at_body_height_blocks():
    grid = flat_floor(5, 1)
    grid.set_cell((2, 1, 0), SOLID)
    assert not oracle_for(grid).has_line_of_sight((0, 0, 0), (4, 0, 0))


def test_clearance_lifts_the_cast_over_low_obstacles():
    grid = VoxelGrid.empty(5, 4, 1)
    grid.fill((0, 0, 0), (4, 0, 0), SOLID)
    grid.set_cell((2, 1, 0), SOLID)
    # cast at y = 2.0 clears a box topping out at 1.5
    assert oracle_for(grid, clearance=2.0).has_line_of_sight((0, 0, 0), (4, 0, 0))


def test_collider_hit_blocks_even_with_ground():
    grid = flat_row(4)
    collider = FakeCollider(hit=True)
    oracle = LineOfSightOracle(world=grid, layout=grid.layout, collider=collider)

    assert not oracle.has_line_of_sight((0, 0, 0), (3, 0, 0))
    origin, direction, radius, max_distance = collider.casts[0]
    assert origin == (0.0, 1.0, 0.0)
    assert radius == 0.3
    assert max_distance == pytest.approx(3.0)


def test_ground_failure_skips_the_cast():
    grid = flat_row(4)
    grid.set_cell((1, 0, 0), EMPTY)
    collider = FakeCollider(hit=False)
    oracle = LineOfSightOracle(world=grid, layout=grid.layout, collider=collider)

    assert not oracle.has_line_of_sight((0, 0, 0), (3, 0, 0))
    assert collider.casts == []


def test_world_errors_mean_no_line_of_sight():
    grid = flat_row(5)
    world = FlakyWorld(grid, broken_occupancy={(2, 0, 0)})
    oracle = LineOfSightOracle(world=world, layout=grid.layout, collider=FakeCollider())
    assert not oracle.has_line_of_sight((0, 0, 0), (4, 0, 0))


def test_hex_floor_line_of_sight():
    layout = HexLayout()
    grid = VoxelGrid.empty(6, 3, 6, layout=layout)
    grid.fill((0, 0, 0), (5, 0, 5), SOLID)
    oracle = oracle_for(grid)
    assert oracle.has_line_of_sight((0, 0, 0), (4, 0, 0))


def test_oracle_parameter_validation():
    grid = flat_row(3)
    with pytest.raises(ValueError):
        LineOfSightOracle(world=grid, layout=SquareLayout(), collider=FakeCollider(), cast_radius=0.0)
    oracle = LineOfSightOracle(world=grid, layout=SquareLayout(), collider=FakeCollider(), cast_radius=0.4)
    assert oracle.sample_radius == pytest.approx(0.2)

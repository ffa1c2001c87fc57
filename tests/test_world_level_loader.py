# tests/test_world_level_loader.py
"""Tests for world.loader (YAML / ASCII level files)."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from contracts.errors import ConfigError
from contracts.world import EMPTY, GOAL_CONTACT, SOLID
from env.loader import CONFIG_ROOT
from nav.service import PathfindingService
from env.schema import PathfindingProfile
from contracts.types import ActionType
from world.layout import HexLayout, SquareLayout
from world.loader import grid_from_layers, load_level, parse_level


def test_layers_map_to_x_y_z():
    grid, markers = grid_from_layers(
        [
            "###\n#.#\n",
            "S..\n..G\n",
        ]
    )
    assert grid.shape == (3, 2, 2)
    assert grid.occupancy((1, 0, 1)) == EMPTY
    assert grid.occupancy((2, 0, 1)) == SOLID
    assert grid.occupancy((0, 1, 0)) == GOAL_CONTACT
    assert markers == {"S": [(0, 1, 0)], "G": [(2, 1, 1)]}


def test_short_rows_are_padded_with_air():
    grid, _ = grid_from_layers(["####\n#"])
    assert grid.shape == (4, 1, 2)
    assert grid.occupancy((3, 0, 1)) == EMPTY


def test_custom_tiles_set_cost():
    level = parse_level(
        {
            "layers": ["#~#"],
            "tiles": {"~": {"occupancy": 1, "cost": 2.5}},
        }
    )
    assert level.grid.occupancy((1, 0, 0)) == 1
    assert level.grid.terrain_cost((1, 0, 0)) == pytest.approx(2.5)
    assert level.name == "level"


@pytest.mark.parametrize(
    "data",
    [
        {"layers": ["#?#"]},
        {"layers": []},
        {"layers": "###"},
        {"layers": ["#"], "tiles": {"ab": {"occupancy": 1}}},
        {"layers": ["#"], "tiles": {"~": {"cost": -1.0}}},
        {"layers": ["#"], "tiles": {"~": 3}},
        {"layers": ["#"], "tiles": {"~": {"occupancy": "lots"}}},
        {"layers": ["#"], "tiles": {"~": {"cost": [1, 2]}}},
        {"layers": ["#"], "tiles": {"~": {"cost": float("inf")}}},
        {"layers": ["#"], "layout": {"kind": "octagon"}},
        {"layers": ["#"], "layout": "square"},
        {"layers": ["#"], "layout": {"kind": "square", "cell_size": "big"}},
        {"layers": ["#"], "layout": {"kind": "square", "cell_height": None}},
        {"layers": ["#"], "layout": {"kind": "square", "cell_size": float("nan")}},
    ],
)
def test_bad_levels_raise_config_error(data):
    with pytest.raises(ConfigError):
        parse_level(data)


def test_layout_block_and_default_layout():
    hex_level = parse_level({"layers": ["#"], "layout": {"kind": "hex", "cell_size": 2.0}})
    assert isinstance(hex_level.grid.layout, HexLayout)
    assert hex_level.grid.layout.cell_size == 2.0

    fallback = HexLayout(cell_size=3.0)
    assert parse_level({"layers": ["#"]}, default_layout=fallback).grid.layout is fallback
    assert isinstance(parse_level({"layers": ["#"]}).grid.layout, SquareLayout)


def test_load_level_from_file(tmp_path: Path):
    path = tmp_path / "tiny.yaml"
    path.write_text(
        dedent(
            """\
            layers:
              - |
                S.G
            """
        ),
        encoding="utf-8",
    )
    level = load_level(path)
    assert level.name == "tiny"
    assert level.marker("S") == (0, 0, 0)
    assert level.marker("G") == (2, 0, 0)
    assert level.marker("X") is None


def test_load_level_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_level(tmp_path / "nope.yaml")


def test_bundled_level_is_solvable():
    level = load_level(CONFIG_ROOT / "levels" / "gap_walk.yaml")
    start, goal = level.marker("S"), level.marker("G")
    assert start == (0, 1, 0)
    assert goal == (9, 2, 2)

    service = PathfindingService.from_profile(level.grid, PathfindingProfile(name="test"))
    session = service.find_path(start, goal)
    service.run_until_idle()

    result = session.result
    assert result.reached_goal
    # the goal sits one layer above the walkway
    assert result.actions[-1] in (ActionType.JUMP, ActionType.GAP_JUMP)

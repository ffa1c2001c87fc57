# src/cli/find_path.py
"""
Find a path through a level file and print the waypoints.

    python -m cli.find_path config/levels/gap_walk.yaml
    python -m cli.find_path level.yaml --start 0,1,0 --goal 9,2,2 --profile batch_square
    python -m cli.find_path level.yaml --events logs/pathfinding/events.log

Endpoints default to the level's S / G markers. A level without its own
layout block uses the layout of the selected config profile.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from app.logging_config import configure_logging
from contracts.errors import ConfigError, QuerySetupError
from contracts.types import Coord, PathResult
from env.loader import load_pathfinding_config
from monitoring.bus import EventBus
from monitoring.events import EventType
from monitoring.logger import JsonFileLogger, log_event
from nav.service import PathfindingService
from world.layout import make_layout
from world.loader import Level, load_level

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNREACHABLE = 1
EXIT_SETUP_ERROR = 2


def parse_coord(text: str) -> Coord:
    """'x,y,z' -> (x, y, z)."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected x,y,z, got {text!r}")
    try:
        x, y, z = (int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"coordinates must be integers, got {text!r}")
    return (x, y, z)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Any-angle (Theta*) pathfinding over a voxel level file."
    )
    parser.add_argument("level", type=Path, help="Level YAML file")
    parser.add_argument("--config", type=Path, default=None, help="Pathfinding config YAML")
    parser.add_argument("--profile", default=None, help="Config profile name")
    parser.add_argument("--start", type=parse_coord, default=None, help="Start cell x,y,z (default: S marker)")
    parser.add_argument("--goal", type=parse_coord, default=None, help="Goal cell x,y,z (default: G marker)")
    parser.add_argument("--events", type=Path, default=None, help="Append monitoring events to this JSONL file")
    parser.add_argument("--max-ticks", type=int, default=None, help="Give up after this many scheduler ticks")
    parser.add_argument("--log-level", default="warning", help="Logging level (debug, info, ...)")
    return parser


def _endpoint(level: Level, given: Optional[Coord], marker: str) -> Coord:
    if given is not None:
        return given
    coord = level.marker(marker)
    if coord is None:
        raise QuerySetupError(f"level '{level.name}' has no {marker} marker; pass it explicitly")
    return coord


def render_result(console: Console, result: PathResult) -> None:
    title = "Path to goal" if result.reached_goal else "Goal unreachable, closest path"
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("cell")
    table.add_column("position")
    table.add_column("action")
    table.add_column("cost", justify="right")

    for i, wp in enumerate(result.waypoints):
        x, y, z = wp.position
        table.add_row(
            str(i),
            ",".join(str(v) for v in wp.coord),
            f"{x:.2f}, {y:.2f}, {z:.2f}",
            wp.action.value,
            f"{wp.cost:.3f}",
        )

    console.print(table)
    console.print(
        f"[bold]status:[/bold] {result.status.name}  "
        f"[bold]cost:[/bold] {result.total_cost:.3f}  "
        f"[bold]expansions:[/bold] {result.expansions}"
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    console = Console()

    bus = EventBus()
    sink: Optional[JsonFileLogger] = None
    if args.events is not None:
        sink = JsonFileLogger(args.events, bus)

    try:
        try:
            profile = load_pathfinding_config(args.config, args.profile)
            default_layout = make_layout(
                kind=profile.layout.kind,
                cell_size=profile.layout.cell_size,
                cell_height=profile.layout.cell_height,
                diagonal=profile.layout.diagonal,
            )
            level = load_level(args.level, default_layout=default_layout)
            start = _endpoint(level, args.start, "S")
            goal = _endpoint(level, args.goal, "G")

            service = PathfindingService.from_profile(level.grid, profile, bus=bus)
            session = service.find_path(start, goal)
        except (ConfigError, QuerySetupError, FileNotFoundError) as exc:
            console.print(f"[red]error:[/red] {escape(str(exc))}")
            return EXIT_SETUP_ERROR

        ticks = service.run_until_idle(args.max_ticks)
        result = session.result
        if result is None:
            log_event(
                bus=bus,
                module="cli",
                event_type=EventType.LOG,
                message="tick budget exhausted",
                payload={"ticks": ticks},
                correlation_id=session.session_id,
            )
            service.cancel(session)
            console.print(f"[yellow]search still running after {ticks} ticks; cancelled[/yellow]")
            return EXIT_UNREACHABLE

        logger.info("search finished in %d ticks", ticks)
        render_result(console, result)
        return EXIT_OK if result.reached_goal else EXIT_UNREACHABLE
    finally:
        if sink is not None:
            sink.close()


if __name__ == "__main__":
    sys.exit(main())

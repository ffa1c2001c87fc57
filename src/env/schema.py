# LayoutConfig, SearchConfig, VisibilityConfig, PathfindingProfile dataclasses
# src/env/schema.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class LayoutConfig:
    """Grid geometry used when a level does not bring its own."""
    kind: str = "hex"            # "square" or "hex"
    cell_size: float = 1.0       # square edge / hex outer radius, world units
    cell_height: float = 1.0     # layer height, world units
    diagonal: bool = False       # square only: 8-connected movement


@dataclass
class SearchConfig:
    """Theta* tuning."""
    jump_cost: float = 3.5
    fall_cost: float = 1.5
    gap_jump_cost: float = 4.0
    expansions_per_step: int = 2     # node expansions per host tick
    straightness: float = 0.01       # weight of the cross-track term, [0, 1]
    heuristic_weight: float = 1.05   # >= 1; > 1 trades optimality for speed
    reopen_frontier: bool = False    # allow decrease-key on queued nodes


@dataclass
class VisibilityConfig:
    """Line-of-sight probe shape."""
    cast_radius: float = 0.3
    clearance: float = 1.0           # upward lift of the cast (agent body)
    sample_radius: float | None = None  # ground sampling; None = cast_radius / 2


@dataclass
class PathfindingProfile:
    """Resolved configuration for one active profile."""
    name: str
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    visibility: VisibilityConfig = field(default_factory=VisibilityConfig)

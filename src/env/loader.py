from __future__ import annotations

import math
import os
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

import yaml

from contracts.errors import ConfigError

from .schema import LayoutConfig, PathfindingProfile, SearchConfig, VisibilityConfig


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG_PATH = CONFIG_ROOT / "pathfinding.yaml"

# Overrides the `profile:` key of the config file when set.
PROFILE_ENV_VAR = "PATHFINDING_PROFILE"

T = TypeVar("T")


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file; the top level must be a mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _select_profile(cfg: Dict[str, Any], override: Optional[str]) -> Tuple[str, Dict[str, Any]]:
    """Return (active_profile_name, active_profile_mapping)."""
    profile_name = override or os.getenv(PROFILE_ENV_VAR) or cfg.get("profile")
    if not profile_name:
        raise ConfigError("pathfinding.yaml must define a 'profile' key.")
    profiles = cfg.get("profiles")
    if not isinstance(profiles, dict):
        raise ConfigError("pathfinding.yaml must define a 'profiles' mapping.")
    if profile_name not in profiles:
        raise ConfigError(f"Profile '{profile_name}' not found in pathfinding.yaml profiles.")
    return profile_name, profiles[profile_name] or {}


def _build(cls: Type[T], raw: Any, section: str) -> T:
    """Instantiate a config dataclass, rejecting unknown keys."""
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ConfigError(f"'{section}' must be a mapping, got {type(raw).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in '{section}': {', '.join(unknown)}")
    return cls(**raw)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_profile(cfg: Dict[str, Any], profile: Optional[str] = None) -> PathfindingProfile:
    """Resolve and validate one profile from an already-loaded mapping."""
    name, raw = _select_profile(cfg, profile)
    if not isinstance(raw, dict):
        raise ConfigError(f"Profile '{name}' must be a mapping.")

    resolved = PathfindingProfile(
        name=name,
        layout=_build(LayoutConfig, raw.get("layout"), "layout"),
        search=_build(SearchConfig, raw.get("search"), "search"),
        visibility=_build(VisibilityConfig, raw.get("visibility"), "visibility"),
    )
    _validate_profile(resolved)
    return resolved


def load_pathfinding_config(
    path: Optional[Path] = None,
    profile: Optional[str] = None,
) -> PathfindingProfile:
    """Main entry point: returns a fully resolved PathfindingProfile."""
    cfg = _load_yaml(Path(path) if path is not None else DEFAULT_CONFIG_PATH)
    return parse_profile(cfg, profile)


_NUMERIC_FIELDS = (
    ("layout", ("cell_size", "cell_height")),
    ("search", ("jump_cost", "fall_cost", "gap_jump_cost", "expansions_per_step",
                "straightness", "heuristic_weight")),
    ("visibility", ("cast_radius", "clearance", "sample_radius")),
)


def _check_numbers(profile: PathfindingProfile) -> None:
    """Every numeric setting must be a finite int/float (sample_radius may be null)."""
    for section, names in _NUMERIC_FIELDS:
        block = getattr(profile, section)
        for name in names:
            value = getattr(block, name)
            if value is None and name == "sample_radius":
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{section}.{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigError(f"{section}.{name} must be finite, got {value!r}")
    if not isinstance(profile.search.expansions_per_step, int):
        raise ConfigError("search.expansions_per_step must be an integer")


def _validate_profile(profile: PathfindingProfile) -> None:
    """Sanity checks, so bad values fail at load time and not mid-search."""
    _check_numbers(profile)

    layout = profile.layout
    if layout.kind not in ("square", "hex"):
        raise ConfigError(f"Invalid layout kind: {layout.kind}")
    if layout.cell_size <= 0 or layout.cell_height <= 0:
        raise ConfigError("layout cell_size and cell_height must be positive")

    search = profile.search
    for name in ("jump_cost", "fall_cost", "gap_jump_cost"):
        if getattr(search, name) < 0:
            raise ConfigError(f"search.{name} must be >= 0")
    if search.expansions_per_step < 1:
        raise ConfigError("search.expansions_per_step must be >= 1")
    if not 0.0 <= search.straightness <= 1.0:
        raise ConfigError("search.straightness must be within [0, 1]")
    if search.heuristic_weight < 1.0:
        raise ConfigError("search.heuristic_weight must be >= 1")

    vis = profile.visibility
    if vis.cast_radius <= 0:
        raise ConfigError("visibility.cast_radius must be positive")
    if vis.cast_radius >= min(layout.cell_size, layout.cell_height):
        # the collider only scans cells adjacent to each sample point
        raise ConfigError("visibility.cast_radius must be smaller than one cell")
    if vis.sample_radius is not None and vis.sample_radius <= 0:
        raise ConfigError("visibility.sample_radius must be positive")

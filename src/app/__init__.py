# src/app/__init__.py
"""Application-level wiring shared by entrypoints."""

from __future__ import annotations

from .logging_config import configure_logging, parse_level

__all__ = [
    "configure_logging",
    "parse_level",
]

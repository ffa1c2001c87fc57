# src/cli/__init__.py
"""Command-line entrypoints."""

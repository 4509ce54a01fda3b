"""Command-line interface for maxrect.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- JSON polygon input (point lists or SVG path data)
- Presets and per-run time budgets
- Machine-readable JSON output
- Precomputed rectangle store updates
"""

from maxrect.cli.app import cli

__all__ = ["cli"]

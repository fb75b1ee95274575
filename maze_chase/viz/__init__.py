"""Visualization layer: themes, renderers, and CLI."""

from maze_chase.viz.cli import capture_snapshots, main
from maze_chase.viz.render import build_cell_array, render_filmstrip, render_snapshot
from maze_chase.viz.theme import (
    DEFAULT_THEME,
    PAPER_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "DEFAULT_THEME",
    "PAPER_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "build_cell_array",
    "capture_snapshots",
    "get_theme",
    "main",
    "render_filmstrip",
    "render_snapshot",
]

"""Visualization theme presets for maze renderers.

Themes are frozen dataclasses that group all styling constants together.
Renderers accept a ``Theme`` instance, so palettes can be swapped via the
``--theme`` CLI argument or programmatically.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    # Per-level maze palette; levels past the end reuse the last entry
    wall_colors: tuple[str, ...] = ("#1e3a5f", "#3d1e5f", "#5f1e3a")
    floor_colors: tuple[str, ...] = ("#0a1628", "#1a0a28", "#280a1a")

    safe_zone_color: str = "#B22222"
    collectible_color: str = "#F5F5DC"
    special_color: str = "#FFD700"
    objective_color: str = "#D2691E"
    pursuer_color: str = "#4169E1"
    frozen_pursuer_color: str = "#87CEEB"
    player_color: str = "#8B4513"

    background_color: str = "#000014"
    text_color: str = "#FFFFFF"
    grid_line_color: str = "#333333"

    def wall_color(self, level: int) -> str:
        return self.wall_colors[min(max(level, 1), len(self.wall_colors)) - 1]

    def floor_color(self, level: int) -> str:
        return self.floor_colors[min(max(level, 1), len(self.floor_colors)) - 1]


DEFAULT_THEME = Theme()

PAPER_THEME = Theme(
    wall_colors=("#404040",),
    floor_colors=("#FFFFFF",),
    safe_zone_color="#F4CCCC",
    collectible_color="#BDBDBD",
    special_color="#FFC107",
    objective_color="#FF5722",
    pursuer_color="#1F77B4",
    frozen_pursuer_color="#9ECAE1",
    player_color="#8C564B",
    background_color="#FFFFFF",
    text_color="#000000",
    grid_line_color="#E0E0E0",
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "paper": PAPER_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name (case-insensitive)."""
    key = name.lower()
    if key not in REGISTERED_THEMES:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {valid}")
    return REGISTERED_THEMES[key]

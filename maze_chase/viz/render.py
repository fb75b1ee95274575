"""Matplotlib-based rendering of game snapshots."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap
from matplotlib.image import AxesImage
from matplotlib.patches import Patch

from maze_chase.simulation.snapshot import GameSnapshot
from maze_chase.viz.theme import DEFAULT_THEME, Theme

# Cell codes, in increasing draw priority
WALL = 0
FLOOR = 1
SAFE_ZONE = 2
COLLECTIBLE = 3
SPECIAL = 4
OBJECTIVE = 5
PURSUER = 6
FROZEN_PURSUER = 7
PLAYER = 8

_LEGEND_LABELS = (
    "Wall",
    "Floor",
    "Safe zone",
    "Bone",
    "Special",
    "Objective",
    "Pursuer",
    "Frozen pursuer",
    "Player",
)


def build_cell_array(snapshot: GameSnapshot) -> np.ndarray:
    """Return a ``(H, W)`` int array of cell codes for *snapshot*.

    Later layers overwrite earlier ones, so the player is always visible.
    """
    if snapshot.grid is None:
        raise ValueError("snapshot has no grid; start a level first")
    cells = np.where(snapshot.grid, FLOOR, WALL).astype(int)
    if snapshot.safe_zone is not None:
        zone = snapshot.safe_zone
        cells[zone.y : zone.y + zone.height, zone.x : zone.x + zone.width] = SAFE_ZONE
    for x, y in snapshot.collectibles:
        cells[y, x] = COLLECTIBLE
    if snapshot.special is not None:
        x, y = snapshot.special.position
        cells[y, x] = SPECIAL
    if snapshot.objective is not None:
        x, y = snapshot.objective
        cells[y, x] = OBJECTIVE
    for pursuer in snapshot.pursuers:
        x, y = pursuer.position
        cells[y, x] = FROZEN_PURSUER if pursuer.frozen else PURSUER
    if snapshot.player is not None:
        x, y = snapshot.player.position
        cells[y, x] = PLAYER
    return cells


def _level_colors(level: int, theme: Theme) -> list[str]:
    return [
        theme.wall_color(level),
        theme.floor_color(level),
        theme.safe_zone_color,
        theme.collectible_color,
        theme.special_color,
        theme.objective_color,
        theme.pursuer_color,
        theme.frozen_pursuer_color,
        theme.player_color,
    ]


def _cell_cmap(level: int, theme: Theme = DEFAULT_THEME) -> tuple[ListedColormap, BoundaryNorm]:
    """Discrete colormap covering every cell code."""
    cmap = ListedColormap(_level_colors(level, theme))
    norm = BoundaryNorm([code - 0.5 for code in range(PLAYER + 2)], cmap.N)
    return cmap, norm


def _legend_handles(level: int, theme: Theme = DEFAULT_THEME) -> list[Patch]:
    return [
        Patch(facecolor=color, edgecolor="gray", label=label)
        for color, label in zip(_level_colors(level, theme), _LEGEND_LABELS, strict=True)
    ]


def _draw_cells(ax: plt.Axes, cells: np.ndarray, level: int, theme: Theme) -> AxesImage:
    cmap, norm = _cell_cmap(level, theme)
    img = ax.imshow(cells, cmap=cmap, norm=norm, origin="upper", aspect="equal")
    h, w = cells.shape
    for x in range(w + 1):
        ax.axvline(x - 0.5, color=theme.grid_line_color, linewidth=0.3)
    for y in range(h + 1):
        ax.axhline(y - 0.5, color=theme.grid_line_color, linewidth=0.3)
    ax.set_xticks([])
    ax.set_yticks([])
    return img


def _panel_title(snapshot: GameSnapshot) -> str:
    return (
        f"L{snapshot.level} t={snapshot.time_ms / 1000:.1f}s "
        f"score {snapshot.score} lives {snapshot.lives}"
    )


def render_snapshot(
    snapshot: GameSnapshot,
    output_path: Path,
    theme: Theme = DEFAULT_THEME,
    title: str | None = None,
) -> Path:
    """Render one frame to *output_path* and return the path."""
    cells = build_cell_array(snapshot)
    fig, ax = plt.subplots(figsize=(cells.shape[1] * 0.35, cells.shape[0] * 0.35 + 0.8))
    fig.patch.set_facecolor(theme.background_color)
    _draw_cells(ax, cells, snapshot.level, theme)
    ax.set_title(
        title if title is not None else _panel_title(snapshot),
        fontsize=9,
        color=theme.text_color,
    )
    fig.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, facecolor=fig.get_facecolor())
    plt.close(fig)
    return output_path


def render_filmstrip(
    snapshots: list[GameSnapshot],
    output_path: Path,
    theme: Theme = DEFAULT_THEME,
    title: str | None = None,
) -> Path:
    """Render a horizontal strip of frames with time labels."""
    if not snapshots:
        raise ValueError("snapshots must not be empty")
    n = len(snapshots)
    fig, axes = plt.subplots(1, n, figsize=(3.2 * n, 3.2), squeeze=False)
    fig.patch.set_facecolor(theme.background_color)

    for col_idx, snapshot in enumerate(snapshots):
        ax = axes[0, col_idx]
        _draw_cells(ax, build_cell_array(snapshot), snapshot.level, theme)
        ax.set_title(_panel_title(snapshot), fontsize=8, color=theme.text_color)

    if title is not None:
        fig.suptitle(title, fontsize=11, color=theme.text_color)
    fig.legend(
        handles=_legend_handles(snapshots[-1].level, theme),
        loc="lower center",
        ncol=5,
        fontsize=7,
        frameon=False,
        labelcolor=theme.text_color,
    )
    fig.tight_layout(rect=(0, 0.12, 1, 0.95))
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, facecolor=fig.get_facecolor())
    plt.close(fig)
    return output_path

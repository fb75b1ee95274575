"""Tests for viz/render.py and viz/theme.py."""

from __future__ import annotations

from pathlib import Path
from random import Random

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from maze_chase.config.types import SpecialKind  # noqa: E402
from maze_chase.domain.entities import ObjectiveItem, SpecialItem  # noqa: E402
from maze_chase.simulation.game import GameStateMachine  # noqa: E402
from maze_chase.simulation.snapshot import GameSnapshot  # noqa: E402
from maze_chase.viz.render import (  # noqa: E402
    COLLECTIBLE,
    FLOOR,
    FROZEN_PURSUER,
    OBJECTIVE,
    PLAYER,
    PURSUER,
    SAFE_ZONE,
    SPECIAL,
    WALL,
    build_cell_array,
    render_filmstrip,
    render_snapshot,
)
from maze_chase.viz.theme import DEFAULT_THEME, PAPER_THEME, get_theme  # noqa: E402


def open_field(width: int, height: int, rng: Random) -> np.ndarray:
    cells = np.zeros((height, width), dtype=bool)
    cells[1:-1, 1:-1] = True
    return cells


def _snapshot() -> GameSnapshot:
    game = GameStateMachine(seed=0, maze_factory=open_field)
    game.begin()
    state = game.level_state
    assert state is not None
    state.collectibles = {(5, 1)}
    game.items.special = SpecialItem(kind=SpecialKind.COOKIE, position=(6, 1))
    game.items.objective = ObjectiveItem(position=(7, 1))
    return game.snapshot()


def test_build_cell_array_layers() -> None:
    cells = build_cell_array(_snapshot())
    assert cells.shape == (17, 21)
    assert cells[0, 0] == WALL
    assert cells[3, 3] == FLOOR
    assert cells[8, 10] == SAFE_ZONE
    assert cells[1, 5] == COLLECTIBLE
    assert cells[1, 6] == SPECIAL
    assert cells[1, 7] == OBJECTIVE
    assert cells[1, 19] == PURSUER
    assert cells[1, 1] == PLAYER


def test_build_cell_array_frozen_pursuers() -> None:
    game = GameStateMachine(seed=0, maze_factory=open_field)
    game.begin()
    assert game.level_state is not None
    game.level_state.frozen = True
    cells = build_cell_array(game.snapshot())
    assert cells[1, 19] == FROZEN_PURSUER


def test_build_cell_array_requires_grid() -> None:
    with pytest.raises(ValueError, match="no grid"):
        build_cell_array(GameStateMachine(seed=0).snapshot())


def test_render_snapshot_writes_png(tmp_path: Path) -> None:
    output = tmp_path / "nested" / "frame.png"
    result = render_snapshot(_snapshot(), output, theme=PAPER_THEME)
    assert result == output
    assert output.exists()
    assert output.stat().st_size > 0


def test_render_filmstrip_writes_png(tmp_path: Path) -> None:
    output = tmp_path / "strip.png"
    render_filmstrip([_snapshot(), _snapshot()], output, title="Seed 0")
    assert output.exists()


def test_render_filmstrip_rejects_empty(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        render_filmstrip([], tmp_path / "strip.png")


def test_theme_level_palette_clamps() -> None:
    assert DEFAULT_THEME.wall_color(1) == "#1e3a5f"
    assert DEFAULT_THEME.floor_color(3) == "#280a1a"
    assert DEFAULT_THEME.wall_color(9) == DEFAULT_THEME.wall_color(3)
    assert PAPER_THEME.wall_color(2) == "#404040"


def test_get_theme() -> None:
    assert get_theme("PAPER") is PAPER_THEME
    with pytest.raises(ValueError, match="Unknown theme"):
        get_theme("neon")

"""Configuration dataclasses and enums shared by the game simulation.

All frozen dataclasses that parameterise a game session and headless batch
runs live here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from maze_chase.config import constants as C

__all__ = [
    "GameConfig",
    "GamePhase",
    "HeadlessRunConfig",
    "LevelSettings",
    "SessionResult",
    "SpecialKind",
]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class GamePhase(Enum):
    """Top-level state of a game session."""

    START = "start"
    PLAYING = "playing"
    PAUSED = "paused"
    CAUGHT = "caught"
    LEVEL_COMPLETE = "levelComplete"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GamePhase.WON, GamePhase.LOST)


class SpecialKind(Enum):
    """Bonus item variants; each spawns at most once per level."""

    DRUMSTICK = "drumstick"
    PIZZA = "pizza"
    COOKIE = "cookie"
    TENNIS_BALL = "tennis"
    CHEESE = "cheese"


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionResult:
    """Outcome of one headless session."""

    session_id: str
    seed: int
    outcome: str
    level_reached: int
    score: int
    lives: int
    elapsed_ms: float
    specials_collected: int


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LevelSettings:
    """Difficulty knobs derived from the level number."""

    level: int
    pursuer_count: int
    pursuer_period_ms: int


@dataclass(frozen=True)
class GameConfig:
    """Every tunable of a game session."""

    maze_width: int = C.MAZE_WIDTH
    maze_height: int = C.MAZE_HEIGHT
    extra_passages: int = C.EXTRA_PASSAGES
    max_level: int = C.MAX_LEVEL
    starting_lives: int = C.STARTING_LIVES
    bone_density: float = C.BONE_DENSITY
    safe_zone_width: int = C.SAFE_ZONE_WIDTH
    safe_zone_height: int = C.SAFE_ZONE_HEIGHT
    frame_ms: float = C.FRAME_MS
    player_tick_ms: float = C.PLAYER_TICK_MS
    pursuer_base_period_ms: float = C.PURSUER_BASE_PERIOD_MS
    pursuer_speedup: float = C.PURSUER_SPEEDUP
    pursuer_base_count: int = C.PURSUER_BASE_COUNT
    greedy_probability: float = C.GREEDY_PROBABILITY
    spawn_exclusion_radius: int = C.SPAWN_EXCLUSION_RADIUS
    special_spawn_delay_ms: float = C.SPECIAL_SPAWN_DELAY_MS
    special_lifespan_ms: float = C.SPECIAL_LIFESPAN_MS
    special_move_ms: float = C.SPECIAL_MOVE_MS
    objective_move_ms: float = C.OBJECTIVE_MOVE_MS
    frozen_ms: float = C.FROZEN_MS
    pursuer_respawn_ms: float = C.PURSUER_RESPAWN_MS
    bone_points: int = C.BONE_POINTS
    special_points: int = C.SPECIAL_POINTS
    pursuer_points: int = C.PURSUER_POINTS
    objective_points: int = C.OBJECTIVE_POINTS
    spawn_celebration_ms: float = C.SPAWN_CELEBRATION_MS
    special_celebration_ms: float = C.SPECIAL_CELEBRATION_MS
    pursuer_celebration_ms: float = C.PURSUER_CELEBRATION_MS
    pause_on_objective_spawn: bool = True
    """Enter PAUSED when the objective appears so the notice can be shown."""

    def __post_init__(self) -> None:
        for name in ("maze_width", "maze_height"):
            value = getattr(self, name)
            if value < C.MIN_MAZE_DIMENSION:
                raise ValueError(f"{name} must be >= {C.MIN_MAZE_DIMENSION}")
            if value % 2 == 0:
                raise ValueError(f"{name} must be odd")
        if self.safe_zone_width < 1 or self.safe_zone_height < 1:
            raise ValueError("safe zone dimensions must be >= 1")
        if (
            self.safe_zone_width > self.maze_width - 4
            or self.safe_zone_height > self.maze_height - 4
        ):
            raise ValueError("safe zone must leave a corridor ring inside the border")
        if self.max_level < 1:
            raise ValueError("max_level must be >= 1")
        if self.starting_lives < 1:
            raise ValueError("starting_lives must be >= 1")
        if not 0.0 <= self.bone_density <= 1.0:
            raise ValueError("bone_density must be in [0.0, 1.0]")
        if not 0.0 <= self.greedy_probability <= 1.0:
            raise ValueError("greedy_probability must be in [0.0, 1.0]")
        if not 0.0 < self.pursuer_speedup <= 1.0:
            raise ValueError("pursuer_speedup must be in (0.0, 1.0]")
        if self.pursuer_base_count < 0:
            raise ValueError("pursuer_base_count must be >= 0")
        if self.extra_passages < 0:
            raise ValueError("extra_passages must be >= 0")
        if self.spawn_exclusion_radius < 0:
            raise ValueError("spawn_exclusion_radius must be >= 0")
        periods = (
            "frame_ms",
            "player_tick_ms",
            "pursuer_base_period_ms",
            "special_spawn_delay_ms",
            "special_lifespan_ms",
            "special_move_ms",
            "objective_move_ms",
            "frozen_ms",
            "pursuer_respawn_ms",
        )
        for name in periods:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        for name in ("bone_points", "special_points", "pursuer_points", "objective_points"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @property
    def spawn_cell(self) -> tuple[int, int]:
        return C.MAZE_START

    @property
    def fallback_cell(self) -> tuple[int, int]:
        """Fixed placement used when no random cell satisfies the exclusion rules."""
        return (self.maze_width - 2, self.maze_height - 2)

    def pursuer_layout(self) -> list[tuple[int, int]]:
        """Start positions, in roster order, for up to five pursuers."""
        w, h = self.maze_width, self.maze_height
        return [
            (w - 2, 1),
            (1, h - 2),
            (w - 2, h - 2),
            (w // 2, 1),
            (w // 2, h - 2),
        ]

    def level_settings(self, level: int) -> LevelSettings:
        """Return pursuer count and speed for *level*."""
        if not 1 <= level <= self.max_level:
            raise ValueError(f"level must be in [1, {self.max_level}]")
        count = min(self.pursuer_base_count + level, len(self.pursuer_layout()))
        raw = self.pursuer_base_period_ms * self.pursuer_speedup ** (level - 1)
        # half-up: level 2 lands exactly on 382.5 and must give 383
        period = math.floor(raw + 0.5)
        return LevelSettings(level=level, pursuer_count=count, pursuer_period_ms=period)


@dataclass(frozen=True)
class HeadlessRunConfig:
    """Settings for a batch of autopilot-driven sessions."""

    n_sessions: int = 1
    base_seed: int = 0
    max_time_ms: float = 600_000
    """Per-session simulated time budget."""
    sample_interval_ms: float = 80
    """Trace sampling period; 0 disables the trace log."""
    out_dir: Path = Path("data/headless")

    def __post_init__(self) -> None:
        if self.n_sessions < 1:
            raise ValueError("n_sessions must be >= 1")
        if self.max_time_ms <= 0:
            raise ValueError("max_time_ms must be > 0")
        if self.sample_interval_ms < 0:
            raise ValueError("sample_interval_ms must be >= 0")

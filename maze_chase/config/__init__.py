"""Configuration layer: constants and typed config dataclasses."""

from maze_chase.config.constants import (
    FLUSH_THRESHOLD,
    MAX_LEVEL,
    MAZE_HEIGHT,
    MAZE_START,
    MAZE_WIDTH,
    STARTING_LIVES,
)
from maze_chase.config.types import (
    GameConfig,
    GamePhase,
    HeadlessRunConfig,
    LevelSettings,
    SessionResult,
    SpecialKind,
)

__all__ = [
    "FLUSH_THRESHOLD",
    "GameConfig",
    "GamePhase",
    "HeadlessRunConfig",
    "LevelSettings",
    "MAX_LEVEL",
    "MAZE_HEIGHT",
    "MAZE_START",
    "MAZE_WIDTH",
    "STARTING_LIVES",
    "SessionResult",
    "SpecialKind",
]

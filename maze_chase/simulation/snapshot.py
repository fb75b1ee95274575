"""Read-only views handed to presentation collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from maze_chase.config.types import GamePhase, SpecialKind
from maze_chase.domain.entities import Facing
from maze_chase.domain.grid import Position, SafeZone


class EventKind(Enum):
    """One-shot notifications emitted by the state machine."""

    LEVEL_STARTED = "level_started"
    BONE_COLLECTED = "bone_collected"
    SPECIAL_SPAWNED = "special_spawned"
    SPECIAL_EXPIRED = "special_expired"
    SPECIAL_COLLECTED = "special_collected"
    PURSUERS_FROZEN = "pursuers_frozen"
    PURSUERS_UNFROZEN = "pursuers_unfrozen"
    PURSUER_CONSUMED = "pursuer_consumed"
    PURSUER_RESPAWNED = "pursuer_respawned"
    CAUGHT = "caught"
    LEVEL_COMPLETE = "level_complete"
    OBJECTIVE_SPAWNED = "objective_spawned"
    OBJECTIVE_COLLECTED = "objective_collected"
    VICTORY = "victory"
    DEFEAT = "defeat"


@dataclass(frozen=True)
class GameEvent:
    kind: EventKind
    at_ms: float
    position: Position | None = None
    detail: str | None = None


class CelebrationKind(Enum):
    """Visual trigger a renderer may animate."""

    SPAWN = "spawn"
    SPECIAL_PICKUP = "special_pickup"
    PURSUER_CONSUMED = "pursuer_consumed"
    LEVEL_COMPLETE = "level_complete"
    VICTORY = "victory"


@dataclass(frozen=True)
class Celebration:
    celebration_id: int
    kind: CelebrationKind
    started_ms: float
    expires_ms: float | None = None
    """``None`` keeps it alive until the next level build or reset."""
    position: Position | None = None


@dataclass(frozen=True)
class PlayerView:
    position: Position
    facing: Facing
    in_safe_zone: bool
    carrying_objective: bool


@dataclass(frozen=True)
class PursuerView:
    pursuer_id: int
    position: Position
    frozen: bool


@dataclass(frozen=True)
class SpecialView:
    kind: SpecialKind
    position: Position


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a renderer needs for one frame."""

    time_ms: float
    phase: GamePhase
    level: int
    lives: int
    score: int
    grid: np.ndarray | None
    safe_zone: SafeZone | None
    player: PlayerView | None
    pursuers: tuple[PursuerView, ...]
    collectibles: frozenset[Position]
    special: SpecialView | None
    objective: Position | None
    collected_specials: tuple[SpecialKind, ...]
    pursuers_frozen: bool
    celebrations: tuple[Celebration, ...]

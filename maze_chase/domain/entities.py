"""Mutable game entities that live on the grid."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum

from maze_chase.config.types import SpecialKind
from maze_chase.domain.grid import Position


class Facing(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass
class Player:
    """The player-controlled agent."""

    position: Position
    facing: Facing = Facing.RIGHT
    carrying_objective: bool = False


@dataclass
class Pursuer:
    pursuer_id: int
    position: Position


@dataclass
class SpecialItem:
    """Timed bonus pickup."""

    kind: SpecialKind
    position: Position


@dataclass
class ObjectiveItem:
    """Final-level item that must be carried to the safe zone."""

    position: Position


@dataclass
class IdAllocator:
    """Monotonic id source; handed-out ids are never returned."""

    _counter: itertools.count = field(default_factory=lambda: itertools.count(1))

    def next_id(self) -> int:
        return next(self._counter)

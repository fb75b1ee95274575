"""Discrete-step player movement driven by a held directional intent."""

from __future__ import annotations

from maze_chase.config.constants import PLAYER_TICK_MS
from maze_chase.domain.entities import Facing, Player
from maze_chase.domain.grid import Direction, GridModel, Position


class AgentMotionController:
    """Moves the player at most one cell per tick while a direction is held.

    ``update`` is polled every frame. A step is attempted once at least
    ``tick_ms`` has elapsed since the previous attempt (the first attempt
    after a quiet period happens immediately). Blocked attempts still consume
    the tick and leave the intent held.
    """

    def __init__(self, player: Player, tick_ms: float = PLAYER_TICK_MS) -> None:
        self.player = player
        self.tick_ms = tick_ms
        self.intent: Direction | None = None
        self._last_attempt_ms: float | None = None

    def start(self, direction: Direction) -> None:
        self.intent = direction

    def end(self, direction: Direction | None = None) -> None:
        """Release the intent; a specific *direction* only clears a matching hold."""
        if direction is None or direction == self.intent:
            self.intent = None

    def clear(self) -> None:
        self.intent = None

    def reset(self, position: Position) -> None:
        """Put the player back on *position* facing right with no intent."""
        self.player.position = position
        self.player.facing = Facing.RIGHT
        self.intent = None

    def update(self, now_ms: float, grid: GridModel) -> bool:
        """Attempt one step against *grid*; return True if the player moved."""
        direction = self.intent
        if direction is None:
            return False
        if self._last_attempt_ms is not None and now_ms - self._last_attempt_ms < self.tick_ms:
            return False
        self._last_attempt_ms = now_ms
        target = direction.apply(self.player.position)
        if not grid.is_walkable(target):
            return False
        self.player.position = target
        if direction is Direction.RIGHT:
            self.player.facing = Facing.RIGHT
        elif direction is Direction.LEFT:
            self.player.facing = Facing.LEFT
        return True

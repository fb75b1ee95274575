"""Adapters that turn raw keyboard and joystick input into held intents."""

from __future__ import annotations

import math

from maze_chase.config.constants import (
    JOYSTICK_DEAD_ZONE_PX,
    JOYSTICK_MAX_RADIUS_PX,
    TAP_MAX_DRAG_PX,
    TAP_MAX_MS,
    TAP_RELEASE_DELAY_MS,
)
from maze_chase.config.types import GamePhase
from maze_chase.domain.grid import Direction
from maze_chase.simulation.clock import TaskKey
from maze_chase.simulation.game import GameStateMachine

ARROW_KEYS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}

PAUSE_KEYS = frozenset({"Escape", "p", "P"})


class KeyboardIntent:
    """Key-down holds a direction; key-up releases it only if it still matches."""

    def __init__(self, game: GameStateMachine) -> None:
        self.game = game

    def key_down(self, key: str) -> bool:
        """Handle a key press; returns True if the key was consumed."""
        direction = ARROW_KEYS.get(key)
        if direction is not None:
            self.game.start_intent(direction)
            return True
        if key in PAUSE_KEYS and self.game.phase in (GamePhase.PLAYING, GamePhase.PAUSED):
            self.game.toggle_pause()
            return True
        return False

    def key_up(self, key: str) -> bool:
        direction = ARROW_KEYS.get(key)
        if direction is None:
            return False
        self.game.end_intent(direction)
        return True


def direction_from_offset(
    dx: float, dy: float, dead_zone: float = JOYSTICK_DEAD_ZONE_PX
) -> Direction | None:
    """Map a knob offset (screen coordinates, y down) to a cardinal direction.

    Angles in [-45, 45) map to RIGHT, [45, 135) to DOWN, [-135, -45) to UP
    and the rest to LEFT. Offsets inside the dead zone give ``None``.
    """
    if math.hypot(dx, dy) < dead_zone:
        return None
    angle = math.degrees(math.atan2(dy, dx))
    if -45 <= angle < 45:
        return Direction.RIGHT
    if 45 <= angle < 135:
        return Direction.DOWN
    if angle >= 135 or angle < -135:
        return Direction.LEFT
    return Direction.UP


def clamp_offset(dx: float, dy: float, max_radius: float = JOYSTICK_MAX_RADIUS_PX) -> tuple[float, float]:
    distance = math.hypot(dx, dy)
    if distance <= max_radius:
        return (dx, dy)
    scale = max_radius / distance
    return (dx * scale, dy * scale)


class JoystickIntent:
    """Virtual joystick with tap-to-step support.

    Offsets are measured from the joystick centre. A release that follows a
    short, nearly stationary press which already started a movement is
    deferred briefly so the single step still lands.
    """

    def __init__(
        self,
        game: GameStateMachine,
        *,
        dead_zone: float = JOYSTICK_DEAD_ZONE_PX,
        max_radius: float = JOYSTICK_MAX_RADIUS_PX,
        tap_max_ms: float = TAP_MAX_MS,
        tap_max_drag: float = TAP_MAX_DRAG_PX,
        release_delay_ms: float = TAP_RELEASE_DELAY_MS,
    ) -> None:
        self.game = game
        self.dead_zone = dead_zone
        self.max_radius = max_radius
        self.tap_max_ms = tap_max_ms
        self.tap_max_drag = tap_max_drag
        self.release_delay_ms = release_delay_ms
        self.active = False
        self.knob: tuple[float, float] = (0.0, 0.0)
        self.current: Direction | None = None
        self._pressed_at_ms = 0.0
        self._press_origin: tuple[float, float] = (0.0, 0.0)
        self._dragged = False
        self._movement_started = False

    def press(self, dx: float, dy: float) -> None:
        self.game.scheduler.cancel(TaskKey.INTENT_RELEASE)
        self.active = True
        self._pressed_at_ms = self.game.now_ms
        self._press_origin = (dx, dy)
        self._dragged = False
        self._movement_started = False
        self._track(dx, dy)

    def drag(self, dx: float, dy: float) -> None:
        if self.active:
            self._track(dx, dy)

    def _track(self, dx: float, dy: float) -> None:
        ox, oy = self._press_origin
        if math.hypot(dx - ox, dy - oy) > self.tap_max_drag:
            self._dragged = True
        self.knob = clamp_offset(dx, dy, self.max_radius)
        direction = direction_from_offset(*self.knob, dead_zone=self.dead_zone)
        if direction is not None:
            if direction is not self.current:
                self.current = direction
                self.game.start_intent(direction)
                self._movement_started = True
        elif self.current is not None:
            self.current = None
            self.game.end_intent()
            self._movement_started = False

    def release(self) -> bool:
        """Let go of the knob; returns True if the release was deferred."""
        if not self.active:
            return False
        elapsed = self.game.now_ms - self._pressed_at_ms
        was_tap = elapsed < self.tap_max_ms and not self._dragged
        deferred = was_tap and self._movement_started
        if deferred:
            self.game.scheduler.schedule(
                TaskKey.INTENT_RELEASE, self.release_delay_ms, self.game.end_intent
            )
        else:
            self.game.end_intent()
        self.active = False
        self.knob = (0.0, 0.0)
        self.current = None
        self._movement_started = False
        return deferred

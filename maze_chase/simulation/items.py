"""Timed lifecycle of special items and the final-level objective item.

Special items appear one at a time after a quiet delay, wander randomly and
vanish if nobody picks them up; each kind appears at most once per level.
The objective item is spawned on demand and wanders faster.

Every timer callback captures the scheduler generation at install time and
does nothing once :meth:`ItemSpawnScheduler.suspend` or
:meth:`ItemSpawnScheduler.reset_level` has bumped it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from random import Random

from maze_chase.config.types import GameConfig, SpecialKind
from maze_chase.domain.entities import ObjectiveItem, SpecialItem
from maze_chase.domain.grid import GridModel, Position
from maze_chase.simulation.clock import TaskKey, TaskScheduler
from maze_chase.simulation.snapshot import EventKind

logger = logging.getLogger(__name__)

ITEM_TASK_KEYS: tuple[TaskKey, ...] = (
    TaskKey.SPECIAL_SPAWN,
    TaskKey.SPECIAL_DESPAWN,
    TaskKey.SPECIAL_MOVE,
    TaskKey.OBJECTIVE_MOVE,
)

EmitFn = Callable[[EventKind, "Position | None", "str | None"], None]


def _noop_emit(kind: EventKind, position: Position | None, detail: str | None) -> None:
    return None


class ItemSpawnScheduler:
    """Owns the special-item slot, the per-level spawned set and the objective."""

    def __init__(
        self,
        scheduler: TaskScheduler,
        rng: Random,
        config: GameConfig,
        *,
        player_position: Callable[[], Position],
        is_active: Callable[[], bool] = lambda: True,
        on_moved: Callable[[], None] = lambda: None,
        emit: EmitFn = _noop_emit,
    ) -> None:
        self.scheduler = scheduler
        self.rng = rng
        self.config = config
        self._player_position = player_position
        self._is_active = is_active
        self._on_moved = on_moved
        self._emit = emit
        self.grid: GridModel | None = None
        self.special: SpecialItem | None = None
        self.objective: ObjectiveItem | None = None
        self.spawned_kinds: set[SpecialKind] = set()
        self._generation = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset_level(self, grid: GridModel | None) -> None:
        """Forget all items and the spawned set; timers stay off until activate()."""
        self.suspend()
        self.grid = grid
        self.special = None
        self.objective = None
        self.spawned_kinds = set()

    def activate(self) -> None:
        """(Re)install the timers the current item state calls for.

        Timers restart from their full period; time spent suspended is not
        credited.
        """
        self.suspend()
        if self.grid is None:
            return
        if self.special is None:
            self._arm_spawn()
        else:
            self._arm_special_timers()
        if self.objective is not None:
            self._arm_objective_timer()

    def suspend(self) -> None:
        self._generation += 1
        self.scheduler.cancel_keys(*ITEM_TASK_KEYS)

    @property
    def kinds_remaining(self) -> list[SpecialKind]:
        return [kind for kind in SpecialKind if kind not in self.spawned_kinds]

    # ------------------------------------------------------------------
    # Timer plumbing
    # ------------------------------------------------------------------

    def _guarded(self, action: Callable[[], None]) -> Callable[[], None]:
        token = self._generation

        def run() -> None:
            if token != self._generation or not self._is_active():
                return
            action()

        return run

    def _arm_spawn(self) -> None:
        if self.special is not None or not self.kinds_remaining:
            return
        self.scheduler.schedule(
            TaskKey.SPECIAL_SPAWN,
            self.config.special_spawn_delay_ms,
            self._guarded(self._spawn_special),
        )

    def _arm_special_timers(self) -> None:
        self.scheduler.schedule(
            TaskKey.SPECIAL_DESPAWN,
            self.config.special_lifespan_ms,
            self._guarded(self._despawn_special),
        )
        self.scheduler.every(
            TaskKey.SPECIAL_MOVE, self.config.special_move_ms, self._guarded(self._move_special)
        )

    def _arm_objective_timer(self) -> None:
        self.scheduler.every(
            TaskKey.OBJECTIVE_MOVE,
            self.config.objective_move_ms,
            self._guarded(self._move_objective),
        )

    def _random_walk(self, position: Position) -> Position:
        assert self.grid is not None
        moves = self.grid.walkable_neighbors(position)
        if not moves:
            return position
        return moves[self.rng.randrange(len(moves))]

    def _valid_spawn_cell(self) -> Position | None:
        assert self.grid is not None
        return self.grid.random_walkable_cell_away_from(
            self._player_position(),
            self.config.spawn_exclusion_radius,
            self.rng,
            exclude_safe_zone=True,
        )

    # ------------------------------------------------------------------
    # Special item
    # ------------------------------------------------------------------

    def _spawn_special(self) -> None:
        remaining = self.kinds_remaining
        if self.special is not None or not remaining:
            return
        cell = self._valid_spawn_cell()
        if cell is None:
            logger.debug("No valid special spawn cell; retrying later")
            self._arm_spawn()
            return
        kind = remaining[self.rng.randrange(len(remaining))]
        self.special = SpecialItem(kind=kind, position=cell)
        self.spawned_kinds.add(kind)
        self._arm_special_timers()
        logger.debug("Spawned %s at %s", kind.value, cell)
        self._emit(EventKind.SPECIAL_SPAWNED, cell, kind.value)

    def _despawn_special(self) -> None:
        if self.special is None:
            return
        expired = self.special
        self.special = None
        self.scheduler.cancel(TaskKey.SPECIAL_MOVE)
        logger.debug("Special %s expired at %s", expired.kind.value, expired.position)
        self._emit(EventKind.SPECIAL_EXPIRED, expired.position, expired.kind.value)
        self._arm_spawn()

    def _move_special(self) -> None:
        if self.special is None:
            return
        new_position = self._random_walk(self.special.position)
        if new_position != self.special.position:
            self.special.position = new_position
            self._on_moved()

    def take_special(self, position: Position) -> SpecialItem | None:
        """Remove and return the special item if it sits on *position*."""
        if self.special is None or self.special.position != position:
            return None
        taken = self.special
        self.special = None
        self.scheduler.cancel(TaskKey.SPECIAL_DESPAWN)
        self.scheduler.cancel(TaskKey.SPECIAL_MOVE)
        self._arm_spawn()
        return taken

    # ------------------------------------------------------------------
    # Objective item
    # ------------------------------------------------------------------

    def spawn_objective(self) -> ObjectiveItem:
        """Place the objective now, falling back to a fixed cell if nothing qualifies."""
        cell = self._valid_spawn_cell()
        if cell is None:
            cell = self.config.fallback_cell
            logger.debug("No valid objective spawn cell; using fallback %s", cell)
        self.objective = ObjectiveItem(position=cell)
        self._arm_objective_timer()
        return self.objective

    def _move_objective(self) -> None:
        if self.objective is None:
            return
        new_position = self._random_walk(self.objective.position)
        if new_position != self.objective.position:
            self.objective.position = new_position
            self._on_moved()

    def take_objective(self, position: Position) -> bool:
        if self.objective is None or self.objective.position != position:
            return False
        self.objective = None
        self.scheduler.cancel(TaskKey.OBJECTIVE_MOVE)
        return True

"""Tests for maze_chase.simulation.items."""

from __future__ import annotations

from random import Random

import numpy as np

from maze_chase.config.types import GameConfig, SpecialKind
from maze_chase.domain.grid import GridModel, Position, SafeZone, manhattan
from maze_chase.simulation.clock import TaskKey, TaskScheduler
from maze_chase.simulation.items import ItemSpawnScheduler
from maze_chase.simulation.snapshot import EventKind


def _open_grid(config: GameConfig) -> GridModel:
    cells = np.zeros((config.maze_height, config.maze_width), dtype=bool)
    cells[1:-1, 1:-1] = True
    zone = SafeZone.centered(
        config.maze_width, config.maze_height, config.safe_zone_width, config.safe_zone_height
    )
    return GridModel(cells, zone)


class _Harness:
    def __init__(self, config: GameConfig | None = None, player: Position = (1, 1)) -> None:
        self.config = config or GameConfig()
        self.scheduler = TaskScheduler()
        self.player = player
        self.active = True
        self.moves = 0
        self.events: list[tuple[EventKind, Position | None, str | None]] = []
        self.items = ItemSpawnScheduler(
            self.scheduler,
            Random(0),
            self.config,
            player_position=lambda: self.player,
            is_active=lambda: self.active,
            on_moved=self._on_moved,
            emit=lambda kind, pos, detail: self.events.append((kind, pos, detail)),
        )
        self.grid = _open_grid(self.config)
        self.items.reset_level(self.grid)
        self.items.activate()

    def _on_moved(self) -> None:
        self.moves += 1


class TestSpecialLifecycle:
    def test_spawns_after_delay_at_valid_cell(self) -> None:
        h = _Harness()
        h.scheduler.advance(9_999)
        assert h.items.special is None
        h.scheduler.advance(1)
        special = h.items.special
        assert special is not None
        assert manhattan(special.position, h.player) > 5
        assert not h.grid.is_in_safe_zone(special.position)
        assert h.events[0][0] is EventKind.SPECIAL_SPAWNED

    def test_each_kind_spawns_at_most_once(self) -> None:
        h = _Harness()
        seen: list[SpecialKind] = []
        for _ in range(5):
            h.scheduler.advance(10_000)
            special = h.items.special
            assert special is not None
            seen.append(special.kind)
            assert h.items.take_special(special.position) is special
        assert sorted(k.value for k in seen) == sorted(k.value for k in SpecialKind)
        assert not h.items.kinds_remaining
        h.scheduler.advance(60_000)
        assert h.items.special is None
        assert not h.scheduler.is_scheduled(TaskKey.SPECIAL_SPAWN)

    def test_despawns_after_lifespan_and_rearms(self) -> None:
        h = _Harness()
        h.scheduler.advance(10_000)
        assert h.items.special is not None
        h.scheduler.advance(20_000)
        assert h.items.special is None
        assert any(kind is EventKind.SPECIAL_EXPIRED for kind, _, _ in h.events)
        assert h.scheduler.due_in(TaskKey.SPECIAL_SPAWN) == 10_000
        assert len(h.items.spawned_kinds) == 1

    def test_special_random_walks(self) -> None:
        h = _Harness()
        h.scheduler.advance(10_000)
        start = h.items.special.position
        h.scheduler.advance(900)
        assert h.moves == 1
        assert manhattan(start, h.items.special.position) == 1

    def test_take_special_wrong_cell(self) -> None:
        h = _Harness()
        h.scheduler.advance(10_000)
        assert h.items.take_special((0, 0)) is None
        assert h.items.special is not None

    def test_no_valid_cell_retries(self) -> None:
        config = GameConfig(maze_width=5, maze_height=5, safe_zone_width=1, safe_zone_height=1)
        h = _Harness(config)
        h.scheduler.advance(10_000)
        assert h.items.special is None
        assert h.items.spawned_kinds == set()
        assert h.scheduler.due_in(TaskKey.SPECIAL_SPAWN) == 10_000

    def test_inactive_phase_suppresses_callbacks(self) -> None:
        h = _Harness()
        h.active = False
        h.scheduler.advance(10_000)
        assert h.items.special is None

    def test_suspend_cancels_and_activate_restarts(self) -> None:
        h = _Harness()
        h.scheduler.advance(6_000)
        h.items.suspend()
        h.scheduler.advance(10_000)
        assert h.items.special is None
        h.items.activate()
        assert h.scheduler.due_in(TaskKey.SPECIAL_SPAWN) == 10_000

    def test_reset_level_clears_spawned_set(self) -> None:
        h = _Harness()
        h.scheduler.advance(10_000)
        h.items.reset_level(h.grid)
        assert h.items.special is None
        assert h.items.spawned_kinds == set()
        assert not h.scheduler.is_scheduled(TaskKey.SPECIAL_MOVE)


class TestObjective:
    def test_spawn_respects_exclusion(self) -> None:
        h = _Harness(player=(3, 3))
        objective = h.items.spawn_objective()
        assert manhattan(objective.position, (3, 3)) > 5
        assert not h.grid.is_in_safe_zone(objective.position)
        assert h.scheduler.is_scheduled(TaskKey.OBJECTIVE_MOVE)

    def test_spawn_falls_back_when_nothing_qualifies(self) -> None:
        config = GameConfig(maze_width=5, maze_height=5, safe_zone_width=1, safe_zone_height=1)
        h = _Harness(config)
        assert h.items.spawn_objective().position == (3, 3)

    def test_objective_moves_every_period(self) -> None:
        h = _Harness()
        objective = h.items.spawn_objective()
        start = objective.position
        h.scheduler.advance(630)
        assert manhattan(start, objective.position) == 1

    def test_take_objective(self) -> None:
        h = _Harness()
        objective = h.items.spawn_objective()
        assert not h.items.take_objective((0, 0))
        assert h.items.take_objective(objective.position)
        assert h.items.objective is None
        assert not h.scheduler.is_scheduled(TaskKey.OBJECTIVE_MOVE)

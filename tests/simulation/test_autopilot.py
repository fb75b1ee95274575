"""Tests for maze_chase.simulation.autopilot."""

from __future__ import annotations

from random import Random

import numpy as np
import pytest

from maze_chase.domain.entities import ObjectiveItem, Pursuer
from maze_chase.domain.grid import Direction
from maze_chase.simulation.autopilot import Autopilot
from maze_chase.simulation.game import GameStateMachine


def open_field(width: int, height: int, rng: Random) -> np.ndarray:
    cells = np.zeros((height, width), dtype=bool)
    cells[1:-1, 1:-1] = True
    return cells


@pytest.fixture
def game() -> GameStateMachine:
    machine = GameStateMachine(seed=0, maze_factory=open_field)
    machine.begin()
    state = machine.level_state
    assert state is not None
    state.pursuers.clear()
    state.collectibles = {(5, 1), (19, 15)}
    return machine


class TestPickTarget:
    def test_nearest_bone(self, game: GameStateMachine) -> None:
        assert Autopilot.pick_target(game.snapshot()) == (5, 1)

    def test_tie_breaks_on_sorted_order(self, game: GameStateMachine) -> None:
        game.level_state.collectibles = {(5, 1), (1, 5)}
        assert Autopilot.pick_target(game.snapshot()) == (1, 5)

    def test_objective_beats_bones(self, game: GameStateMachine) -> None:
        game.items.objective = ObjectiveItem(position=(9, 3))
        assert Autopilot.pick_target(game.snapshot()) == (9, 3)

    def test_carrying_heads_for_safe_zone(self, game: GameStateMachine) -> None:
        game.level_state.player.carrying_objective = True
        assert Autopilot.pick_target(game.snapshot()) == (8, 7)

    def test_no_level_no_target(self) -> None:
        machine = GameStateMachine(seed=0, maze_factory=open_field)
        assert Autopilot.pick_target(machine.snapshot()) is None


class TestChooseDirection:
    def test_straight_path(self, game: GameStateMachine) -> None:
        assert Autopilot(game).choose_direction() is Direction.RIGHT

    def test_detours_around_pursuer(self, game: GameStateMachine) -> None:
        game.level_state.pursuers.append(Pursuer(pursuer_id=9, position=(3, 1)))
        assert Autopilot(game).choose_direction() is Direction.DOWN

    def test_frozen_pursuers_are_not_avoided(self, game: GameStateMachine) -> None:
        state = game.level_state
        state.pursuers.append(Pursuer(pursuer_id=9, position=(3, 1)))
        state.frozen = True
        assert Autopilot(game).choose_direction() is Direction.RIGHT

    def test_falls_back_when_boxed_in(self, game: GameStateMachine) -> None:
        state = game.level_state
        state.pursuers.extend(
            [Pursuer(pursuer_id=8, position=(3, 1)), Pursuer(pursuer_id=9, position=(1, 3))]
        )
        assert Autopilot(game).choose_direction() is Direction.RIGHT

    def test_fallback_skips_occupied_cells(self, game: GameStateMachine) -> None:
        state = game.level_state
        state.pursuers.extend(
            [Pursuer(pursuer_id=8, position=(2, 1)), Pursuer(pursuer_id=9, position=(1, 2))]
        )
        assert Autopilot(game).choose_direction() is None

    def test_idle_when_not_playing(self, game: GameStateMachine) -> None:
        game.pause()
        assert Autopilot(game).choose_direction() is None

    def test_graph_is_reused_within_level(self, game: GameStateMachine) -> None:
        pilot = Autopilot(game)
        pilot.choose_direction()
        first = pilot._graph
        pilot.choose_direction()
        assert pilot._graph is first


class TestDrive:
    def test_drive_sets_intent(self, game: GameStateMachine) -> None:
        assert Autopilot(game).drive() is Direction.RIGHT
        assert game.motion.intent is Direction.RIGHT

    def test_drive_collects_bones(self, game: GameStateMachine) -> None:
        pilot = Autopilot(game)
        for _ in range(10):
            pilot.drive()
            game.advance(80)
        assert (5, 1) not in game.level_state.collectibles
        assert game.score >= 10

    def test_drive_clears_intent_without_target(self, game: GameStateMachine) -> None:
        game.start_intent(Direction.DOWN)
        game.pause()
        assert Autopilot(game).drive() is None
        assert game.motion.intent is None

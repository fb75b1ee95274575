"""Tests for maze_chase.domain.pursuit and entity helpers."""

from __future__ import annotations

from random import Random

import numpy as np
import pytest

from maze_chase.domain.entities import IdAllocator, Pursuer
from maze_chase.domain.grid import GridModel, SafeZone
from maze_chase.domain.pursuit import PursuerAI, build_roster


def _open_grid() -> GridModel:
    cells = np.zeros((9, 9), dtype=bool)
    cells[1:-1, 1:-1] = True
    return GridModel(cells, SafeZone.centered(9, 9, 1, 1))


class TestBuildRoster:
    def test_takes_first_layout_slots_with_fresh_ids(self) -> None:
        ids = IdAllocator()
        layout = [(7, 1), (1, 7), (7, 7)]
        roster = build_roster(layout, 2, ids)
        assert [p.position for p in roster] == [(7, 1), (1, 7)]
        assert [p.pursuer_id for p in roster] == [1, 2]
        again = build_roster(layout, 2, ids)
        assert [p.pursuer_id for p in again] == [3, 4]

    def test_rejects_count_beyond_layout(self) -> None:
        with pytest.raises(ValueError, match="layout size"):
            build_roster([(1, 1)], 2, IdAllocator())


class TestPursuerAI:
    def test_rejects_bad_probability(self) -> None:
        with pytest.raises(ValueError):
            PursuerAI(Random(0), greedy_probability=-0.1)

    def test_always_greedy_moves_closer(self) -> None:
        ai = PursuerAI(Random(0), greedy_probability=1.0)
        assert ai.choose_step((4, 4), (7, 4), _open_grid()) == (5, 4)
        assert ai.choose_step((4, 4), (4, 1), _open_grid()) == (4, 3)

    def test_greedy_tie_prefers_neighbor_order(self) -> None:
        ai = PursuerAI(Random(0), greedy_probability=1.0)
        # RIGHT and DOWN are equally close to the target; RIGHT comes first
        assert ai.choose_step((4, 4), (6, 6), _open_grid()) == (5, 4)
        # LEFT and UP tie; LEFT comes first
        assert ai.choose_step((4, 4), (2, 2), _open_grid()) == (3, 4)

    def test_never_greedy_stays_on_walkable_neighbors(self) -> None:
        ai = PursuerAI(Random(1), greedy_probability=0.0)
        grid = _open_grid()
        for _ in range(30):
            step = ai.choose_step((1, 1), (7, 7), grid)
            assert step in {(2, 1), (1, 2)}

    def test_boxed_in_pursuer_stays(self) -> None:
        cells = np.zeros((5, 5), dtype=bool)
        cells[2, 2] = True
        grid = GridModel(cells, SafeZone(x=0, y=0, width=1, height=1))
        pursuer = Pursuer(pursuer_id=1, position=(2, 2))
        assert PursuerAI(Random(0)).step(pursuer, (1, 1), grid) is False
        assert pursuer.position == (2, 2)

    def test_step_reports_movement(self) -> None:
        pursuer = Pursuer(pursuer_id=1, position=(4, 4))
        assert PursuerAI(Random(0), greedy_probability=1.0).step(pursuer, (4, 7), _open_grid())
        assert pursuer.position == (4, 5)


class TestIdAllocator:
    def test_ids_never_repeat(self) -> None:
        ids = IdAllocator()
        issued = [ids.next_id() for _ in range(10)]
        assert issued == list(range(1, 11))

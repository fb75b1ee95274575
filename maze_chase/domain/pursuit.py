"""Pursuer movement policy.

Each step a pursuer looks at its walkable neighbors and, with probability
``greedy_probability``, takes the one closest (Manhattan) to the player;
otherwise it picks one uniformly. Ties go to the first candidate in
RIGHT, LEFT, DOWN, UP order. Pursuers ignore one another, so several may
share a cell.
"""

from __future__ import annotations

from random import Random

from maze_chase.config.constants import GREEDY_PROBABILITY
from maze_chase.domain.entities import IdAllocator, Pursuer
from maze_chase.domain.grid import GridModel, Position, manhattan


def build_roster(layout: list[Position], count: int, ids: IdAllocator) -> list[Pursuer]:
    """Place *count* pursuers on the first layout slots with fresh ids."""
    if count > len(layout):
        raise ValueError(f"count cannot exceed layout size ({len(layout)})")
    return [Pursuer(pursuer_id=ids.next_id(), position=pos) for pos in layout[:count]]


class PursuerAI:
    """Stateless step chooser shared by every pursuer."""

    def __init__(self, rng: Random, greedy_probability: float = GREEDY_PROBABILITY) -> None:
        if not 0.0 <= greedy_probability <= 1.0:
            raise ValueError("greedy_probability must be in [0.0, 1.0]")
        self.rng = rng
        self.greedy_probability = greedy_probability

    def choose_step(self, position: Position, target: Position, grid: GridModel) -> Position:
        candidates = grid.walkable_neighbors(position)
        if not candidates:
            return position
        if self.rng.random() < self.greedy_probability:
            # min() keeps the first of equal keys, preserving neighbor order
            return min(candidates, key=lambda cell: manhattan(cell, target))
        return candidates[self.rng.randrange(len(candidates))]

    def step(self, pursuer: Pursuer, target: Position, grid: GridModel) -> bool:
        """Move *pursuer* one cell toward or around *target*; True if it moved."""
        new_position = self.choose_step(pursuer.position, target, grid)
        moved = new_position != pursuer.position
        pursuer.position = new_position
        return moved

"""Walkability grid, safe-zone rectangle, and spawn-placement queries.

Cells are a ``(height, width)`` boolean array indexed ``[y, x]`` with
``True`` meaning open floor. A :class:`GridModel` freezes its array, so a
level's layout can only change during level construction.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import TypeAlias

import networkx as nx
import numpy as np

Position: TypeAlias = tuple[int, int]
"""Grid cell as ``(x, y)``."""


class Direction(Enum):
    """Cardinal unit steps; member order is the canonical neighbor order."""

    RIGHT = (1, 0)
    LEFT = (-1, 0)
    DOWN = (0, 1)
    UP = (0, -1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    def apply(self, pos: Position) -> Position:
        return (pos[0] + self.dx, pos[1] + self.dy)


NEIGHBOR_ORDER: tuple[Direction, ...] = tuple(Direction)


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


@dataclass(frozen=True)
class SafeZone:
    """Axis-aligned rectangle where the player cannot be caught."""

    x: int
    y: int
    width: int
    height: int

    @classmethod
    def centered(cls, grid_width: int, grid_height: int, width: int, height: int) -> SafeZone:
        return cls(
            x=(grid_width - width) // 2,
            y=(grid_height - height) // 2,
            width=width,
            height=height,
        )

    def contains(self, pos: Position) -> bool:
        x, y = pos
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def cells(self) -> list[Position]:
        return [
            (x, y)
            for y in range(self.y, self.y + self.height)
            for x in range(self.x, self.x + self.width)
        ]

    def approach_cells(self) -> list[Position]:
        """Corridor cells just outside the middle of each side."""
        mid_x = self.x + self.width // 2
        mid_y = self.y + self.height // 2
        return [
            (mid_x, self.y - 1),
            (mid_x, self.y + self.height),
            (self.x - 1, mid_y),
            (self.x + self.width, mid_y),
        ]


def carve_cells(cells: np.ndarray, positions: Iterable[Position]) -> None:
    """Force *positions* open, skipping the border ring."""
    height, width = cells.shape
    for x, y in positions:
        if 0 < x < width - 1 and 0 < y < height - 1:
            cells[y, x] = True


def carve_safe_zone(cells: np.ndarray, zone: SafeZone) -> None:
    """Open the safe-zone block and the four approach cells in place."""
    carve_cells(cells, zone.cells())
    carve_cells(cells, zone.approach_cells())


class GridModel:
    """Read-only walkability grid plus the level's safe zone."""

    def __init__(self, cells: np.ndarray, safe_zone: SafeZone) -> None:
        if cells.ndim != 2:
            raise ValueError("cells must be a 2D array")
        frozen = np.array(cells, dtype=bool, copy=True)
        frozen.flags.writeable = False
        self.cells = frozen
        self.safe_zone = safe_zone

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    def in_bounds(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, pos: Position) -> bool:
        return self.in_bounds(pos) and bool(self.cells[pos[1], pos[0]])

    def is_in_safe_zone(self, pos: Position) -> bool:
        return self.safe_zone.contains(pos)

    def walkable_neighbors(self, pos: Position) -> list[Position]:
        """Walkable orthogonal neighbors in RIGHT, LEFT, DOWN, UP order."""
        result: list[Position] = []
        for direction in NEIGHBOR_ORDER:
            candidate = direction.apply(pos)
            if self.is_walkable(candidate):
                result.append(candidate)
        return result

    def open_cells(self) -> list[Position]:
        """All open cells in row-major order."""
        ys, xs = np.nonzero(self.cells)
        return [(int(x), int(y)) for y, x in zip(ys, xs, strict=True)]

    def random_walkable_cell_away_from(
        self,
        pos: Position,
        min_distance: int,
        rng: Random,
        *,
        exclude_safe_zone: bool = True,
        exclude: Iterable[Position] = (),
    ) -> Position | None:
        """Pick uniformly among open cells farther than *min_distance* from *pos*.

        Distance is Manhattan and the comparison is strict. Returns ``None``
        when nothing qualifies.
        """
        ys, xs = np.indices(self.cells.shape)
        mask = self.cells & ((np.abs(xs - pos[0]) + np.abs(ys - pos[1])) > min_distance)
        if exclude_safe_zone:
            zone = self.safe_zone
            mask[zone.y : zone.y + zone.height, zone.x : zone.x + zone.width] = False
        for x, y in exclude:
            if self.in_bounds((x, y)):
                mask[y, x] = False
        candidates = np.argwhere(mask)
        if len(candidates) == 0:
            return None
        y, x = candidates[rng.randrange(len(candidates))]
        return (int(x), int(y))

    def to_graph(self) -> nx.Graph:
        """Open cells as nodes, orthogonal adjacency as edges."""
        graph = nx.Graph()
        for cell in self.open_cells():
            graph.add_node(cell)
            for neighbor in (Direction.RIGHT.apply(cell), Direction.DOWN.apply(cell)):
                if self.is_walkable(neighbor):
                    graph.add_edge(cell, neighbor)
        return graph

    def is_connected(self) -> bool:
        graph = self.to_graph()
        return graph.number_of_nodes() > 0 and nx.is_connected(graph)

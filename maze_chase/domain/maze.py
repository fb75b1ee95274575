"""Randomized maze generation.

The layout starts as a perfect maze carved by a randomized depth-first walk
over odd coordinates, gains a few shortcut loops, and finally has every dead
end opened up so each corridor cell has at least two exits.

Border invariant: row/column 0 and the last row/column are never opened.
"""

from __future__ import annotations

from collections.abc import Iterator
from random import Random

import numpy as np

from maze_chase.config.constants import EXTRA_PASSAGES, MAZE_START, MIN_MAZE_DIMENSION
from maze_chase.domain.grid import NEIGHBOR_ORDER, Position

_CARVE_STEPS: tuple[tuple[int, int], ...] = ((0, -2), (0, 2), (-2, 0), (2, 0))


def validate_dimensions(width: int, height: int, start: Position = MAZE_START) -> None:
    """Reject layouts the carving walk is not defined for."""
    if width < MIN_MAZE_DIMENSION or height < MIN_MAZE_DIMENSION:
        raise ValueError(f"maze dimensions must be >= {MIN_MAZE_DIMENSION}")
    if width % 2 == 0 or height % 2 == 0:
        raise ValueError("maze dimensions must be odd")
    x, y = start
    if not (0 < x < width - 1 and 0 < y < height - 1):
        raise ValueError("start cell must lie inside the border")
    if x % 2 == 0 or y % 2 == 0:
        raise ValueError("start cell must have odd coordinates")


def _is_interior(cells: np.ndarray, x: int, y: int) -> bool:
    height, width = cells.shape
    return 0 < x < width - 1 and 0 < y < height - 1


def open_neighbor_count(cells: np.ndarray, x: int, y: int) -> int:
    """Number of open orthogonal neighbors of ``(x, y)``."""
    height, width = cells.shape
    count = 0
    for direction in NEIGHBOR_ORDER:
        nx_, ny_ = x + direction.dx, y + direction.dy
        if 0 <= nx_ < width and 0 <= ny_ < height and cells[ny_, nx_]:
            count += 1
    return count


def find_dead_ends(cells: np.ndarray) -> list[Position]:
    """Open interior cells with exactly one open neighbor."""
    height, width = cells.shape
    return [
        (x, y)
        for y in range(1, height - 1)
        for x in range(1, width - 1)
        if cells[y, x] and open_neighbor_count(cells, x, y) == 1
    ]


def _shuffled_steps(rng: Random) -> Iterator[tuple[int, int]]:
    steps = list(_CARVE_STEPS)
    rng.shuffle(steps)
    return iter(steps)


def _carve(cells: np.ndarray, start: Position, rng: Random) -> None:
    """Depth-first carving with an explicit stack of pending directions.

    Equivalent to the recursive walk: a cell's remaining directions are only
    examined after the subtree of the previous direction is finished, and the
    "still a wall" test is evaluated at that moment.
    """
    x0, y0 = start
    cells[y0, x0] = True
    stack: list[tuple[Position, Iterator[tuple[int, int]]]] = [(start, _shuffled_steps(rng))]
    while stack:
        (x, y), steps = stack[-1]
        for dx, dy in steps:
            nx_, ny_ = x + dx, y + dy
            if _is_interior(cells, nx_, ny_) and not cells[ny_, nx_]:
                cells[y + dy // 2, x + dx // 2] = True
                cells[ny_, nx_] = True
                stack.append(((nx_, ny_), _shuffled_steps(rng)))
                break
        else:
            stack.pop()


def _add_extra_passages(cells: np.ndarray, attempts: int, rng: Random) -> None:
    height, width = cells.shape
    for _ in range(attempts):
        x = rng.randrange(1, width - 1)
        y = rng.randrange(1, height - 1)
        if not cells[y, x] and open_neighbor_count(cells, x, y) >= 2:
            cells[y, x] = True


def remove_dead_ends(cells: np.ndarray, rng: Random) -> int:
    """Open a wall next to every dead end until a scan makes no fix.

    Scans are row-major and mutate in place, so a fix can resolve or create
    dead ends later in the same scan. Every scan that continues the loop has
    opened at least one interior wall, and walls are finite, so the loop
    terminates. Returns the number of cells opened.
    """
    height, width = cells.shape
    opened = 0
    changed = True
    while changed:
        changed = False
        for y in range(1, height - 1):
            for x in range(1, width - 1):
                if not cells[y, x] or open_neighbor_count(cells, x, y) != 1:
                    continue
                walls = [
                    (x + d.dx, y + d.dy)
                    for d in NEIGHBOR_ORDER
                    if _is_interior(cells, x + d.dx, y + d.dy) and not cells[y + d.dy, x + d.dx]
                ]
                if walls:
                    wx, wy = walls[rng.randrange(len(walls))]
                    cells[wy, wx] = True
                    opened += 1
                    changed = True
    return opened


def generate_maze(
    width: int,
    height: int,
    rng: Random,
    *,
    extra_passages: int = EXTRA_PASSAGES,
    start: Position = MAZE_START,
) -> np.ndarray:
    """Return a ``(height, width)`` boolean grid, ``True`` for open cells."""
    validate_dimensions(width, height, start)
    cells = np.zeros((height, width), dtype=bool)
    _carve(cells, start, rng)
    _add_extra_passages(cells, extra_passages, rng)
    remove_dead_ends(cells, rng)
    return cells

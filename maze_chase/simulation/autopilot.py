"""Scripted player used by headless runs and tests."""

from __future__ import annotations

import logging

import networkx as nx

from maze_chase.config.types import GamePhase
from maze_chase.domain.grid import NEIGHBOR_ORDER, Direction, GridModel, Position, manhattan
from maze_chase.simulation.game import GameStateMachine
from maze_chase.simulation.snapshot import GameSnapshot

logger = logging.getLogger(__name__)

DANGER_RADIUS = 2
"""Cells this close (Manhattan) to an unfrozen pursuer are avoided."""


class Autopilot:
    """Greedy goal picker plus A* over the open-cell graph.

    Goal order: the safe zone while carrying the objective, then the
    objective, then the nearest collectible. Cells near unfrozen pursuers
    are removed from the graph before searching; when no path survives the
    first walkable, unoccupied neighbor is taken.
    """

    def __init__(self, game: GameStateMachine, danger_radius: int = DANGER_RADIUS) -> None:
        self.game = game
        self.danger_radius = danger_radius
        self._graph: nx.Graph | None = None
        self._graph_grid: GridModel | None = None

    def _base_graph(self) -> nx.Graph:
        state = self.game.level_state
        assert state is not None
        if self._graph is None or self._graph_grid is not state.grid:
            self._graph = state.grid.to_graph()
            self._graph_grid = state.grid
        return self._graph

    @staticmethod
    def pick_target(snapshot: GameSnapshot) -> Position | None:
        player = snapshot.player
        if player is None:
            return None
        origin = player.position
        if player.carrying_objective and snapshot.safe_zone is not None:
            return min(snapshot.safe_zone.cells(), key=lambda cell: manhattan(cell, origin))
        if snapshot.objective is not None:
            return snapshot.objective
        if snapshot.collectibles:
            # sorted first so ties resolve the same way every run
            return min(sorted(snapshot.collectibles), key=lambda cell: manhattan(cell, origin))
        return None

    def _danger_cells(self, snapshot: GameSnapshot) -> set[Position]:
        if snapshot.pursuers_frozen:
            return set()
        danger: set[Position] = set()
        radius = self.danger_radius
        for pursuer in snapshot.pursuers:
            px, py = pursuer.position
            for dx in range(-radius, radius + 1):
                span = radius - abs(dx)
                for dy in range(-span, span + 1):
                    danger.add((px + dx, py + dy))
        return danger

    def choose_direction(self, snapshot: GameSnapshot | None = None) -> Direction | None:
        snapshot = snapshot if snapshot is not None else self.game.snapshot()
        if snapshot.phase is not GamePhase.PLAYING or snapshot.player is None:
            return None
        target = self.pick_target(snapshot)
        start = snapshot.player.position
        if target is None or target == start:
            return None
        danger = self._danger_cells(snapshot) - {start, target}
        graph = self._base_graph()
        view = nx.restricted_view(graph, [cell for cell in danger if cell in graph], [])
        try:
            path = nx.astar_path(view, start, target, heuristic=manhattan)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            logger.debug("No safe path from %s to %s", start, target)
            return self._fallback(snapshot)
        step = path[1]
        return next(d for d in NEIGHBOR_ORDER if d.apply(start) == step)

    def _fallback(self, snapshot: GameSnapshot) -> Direction | None:
        state = self.game.level_state
        assert state is not None and snapshot.player is not None
        start = snapshot.player.position
        occupied = {p.position for p in snapshot.pursuers}
        for direction in NEIGHBOR_ORDER:
            candidate = direction.apply(start)
            if state.grid.is_walkable(candidate) and candidate not in occupied:
                return direction
        return None

    def drive(self) -> Direction | None:
        """Update the game's held intent; returns the direction chosen."""
        direction = self.choose_direction()
        if direction is None:
            self.game.end_intent()
        else:
            self.game.start_intent(direction)
        return direction

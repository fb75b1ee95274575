"""Session state machine: level construction, contact rules, and timers.

A :class:`GameStateMachine` owns one session at a time. Everything that
happens over time (player steps, pursuer steps, item timers, frozen expiry,
respawns, celebrations) is a task on the machine's :class:`TaskScheduler`;
callers drive the clock with :meth:`GameStateMachine.advance` and read state
through :meth:`GameStateMachine.snapshot` and
:meth:`GameStateMachine.drain_events`.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from random import Random

import numpy as np

from maze_chase.config.types import GameConfig, GamePhase, LevelSettings, SpecialKind
from maze_chase.domain.entities import IdAllocator, Player, Pursuer
from maze_chase.domain.grid import (
    Direction,
    GridModel,
    Position,
    SafeZone,
    carve_cells,
    carve_safe_zone,
)
from maze_chase.domain.maze import generate_maze
from maze_chase.domain.motion import AgentMotionController
from maze_chase.domain.pursuit import PursuerAI, build_roster
from maze_chase.simulation.clock import TaskKey, TaskScheduler
from maze_chase.simulation.items import ItemSpawnScheduler
from maze_chase.simulation.snapshot import (
    Celebration,
    CelebrationKind,
    EventKind,
    GameEvent,
    GameSnapshot,
    PlayerView,
    PursuerView,
    SpecialView,
)

logger = logging.getLogger(__name__)

MazeFactory = Callable[[int, int, Random], np.ndarray]

# Tasks that only make sense while the phase is PLAYING; item timers are
# handled by ItemSpawnScheduler.suspend().
PHASE_GATED_KEYS: tuple[TaskKey, ...] = (
    TaskKey.PLAYER_TICK,
    TaskKey.PURSUER_TICK,
    TaskKey.INTENT_RELEASE,
)


class InvalidTransitionError(RuntimeError):
    """A transition was requested from a phase that does not allow it."""


@dataclass
class SessionState:
    """Progress that survives level changes within one session."""

    phase: GamePhase = GamePhase.START
    level: int = 1
    lives: int = 3
    score: int = 0
    collected_specials: list[SpecialKind] = field(default_factory=list)


@dataclass
class LevelState:
    """Everything rebuilt from scratch when a level starts."""

    settings: LevelSettings
    grid: GridModel
    player: Player
    pursuers: list[Pursuer]
    ids: IdAllocator
    collectibles: set[Position]
    frozen: bool = False
    roster_epoch: int = 0
    """Bumped whenever the roster is rebuilt; pending respawns compare it."""


class GameStateMachine:
    """Single-session game controller on a virtual clock."""

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        rng: Random | None = None,
        seed: int | None = None,
        maze_factory: MazeFactory | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else Random(seed)
        self.maze_factory: MazeFactory = (
            maze_factory
            if maze_factory is not None
            else partial(generate_maze, extra_passages=self.config.extra_passages)
        )
        self.scheduler = TaskScheduler()
        self.pursuer_ai = PursuerAI(self.rng, self.config.greedy_probability)
        self.items = ItemSpawnScheduler(
            self.scheduler,
            self.rng,
            self.config,
            player_position=self._player_position,
            is_active=self._is_playing,
            on_moved=self._resolve_contacts,
            emit=self._emit,
        )
        self.session = SessionState(lives=self.config.starting_lives)
        self.level_state: LevelState | None = None
        self.motion: AgentMotionController | None = None
        self._events: list[GameEvent] = []
        self._celebrations: dict[int, Celebration] = {}
        self._celebration_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    @property
    def now_ms(self) -> float:
        return self.scheduler.now_ms

    @property
    def phase(self) -> GamePhase:
        return self.session.phase

    @property
    def level(self) -> int:
        return self.session.level

    @property
    def lives(self) -> int:
        return self.session.lives

    @property
    def score(self) -> int:
        return self.session.score

    def _is_playing(self) -> bool:
        return self.session.phase is GamePhase.PLAYING

    def _player_position(self) -> Position:
        if self.level_state is None:
            return self.config.spawn_cell
        return self.level_state.player.position

    def _require(self, *phases: GamePhase) -> None:
        if self.session.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise InvalidTransitionError(
                f"cannot do this in phase {self.session.phase.value!r} (needs {allowed})"
            )

    def _level(self) -> LevelState:
        if self.level_state is None:
            raise InvalidTransitionError("no level has been built")
        return self.level_state

    # ------------------------------------------------------------------
    # Session transitions
    # ------------------------------------------------------------------

    def begin(self) -> None:
        """START -> PLAYING on level 1."""
        self._require(GamePhase.START)
        logger.info("Session started")
        self._build_level(1)

    def reset(self) -> None:
        """Return to START with a fresh session; allowed from any phase."""
        self.scheduler.cancel_all()
        self.items.reset_level(None)
        self.session = SessionState(lives=self.config.starting_lives)
        self.level_state = None
        self.motion = None
        self._celebrations.clear()

    def new_session(self) -> None:
        self.reset()
        self.begin()

    def start_at_level(self, level: int) -> None:
        """Fresh session that starts directly on *level*."""
        self.config.level_settings(level)
        self.reset()
        logger.info("Session started at level %d", level)
        self._build_level(level)

    def pause(self) -> None:
        self._require(GamePhase.PLAYING)
        self.session.phase = GamePhase.PAUSED
        self._suspend_timers()
        logger.debug("Paused at %.0f ms", self.now_ms)

    def resume(self) -> None:
        self._require(GamePhase.PAUSED)
        self.session.phase = GamePhase.PLAYING
        self._install_timers()
        logger.debug("Resumed at %.0f ms", self.now_ms)
        self._resolve_contacts()

    def toggle_pause(self) -> None:
        if self.session.phase is GamePhase.PLAYING:
            self.pause()
        elif self.session.phase is GamePhase.PAUSED:
            self.resume()
        else:
            self._require(GamePhase.PLAYING, GamePhase.PAUSED)

    def advance_level(self) -> None:
        """LEVEL_COMPLETE -> PLAYING on the next level."""
        self._require(GamePhase.LEVEL_COMPLETE)
        self._build_level(self.session.level + 1)

    def acknowledge_catch(self) -> None:
        """CAUGHT -> PLAYING with the player and roster back at their starts."""
        self._require(GamePhase.CAUGHT)
        state = self._level()
        assert self.motion is not None
        self.motion.reset(self.config.spawn_cell)
        state.roster_epoch += 1
        state.pursuers = build_roster(
            self.config.pursuer_layout(), state.settings.pursuer_count, state.ids
        )
        self.session.phase = GamePhase.PLAYING
        self._install_timers()
        self._celebrate(CelebrationKind.SPAWN, self.config.spawn_celebration_ms)
        self._resolve_contacts()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def start_intent(self, direction: Direction) -> None:
        """Hold *direction*; ignored unless the phase is PLAYING."""
        if self.motion is not None and self._is_playing():
            self.motion.start(direction)

    def end_intent(self, direction: Direction | None = None) -> None:
        if self.motion is not None:
            self.motion.end(direction)

    # ------------------------------------------------------------------
    # Clock and outputs
    # ------------------------------------------------------------------

    def advance(self, elapsed_ms: float) -> int:
        return self.scheduler.advance(elapsed_ms)

    def drain_events(self) -> list[GameEvent]:
        events, self._events = self._events, []
        return events

    def snapshot(self) -> GameSnapshot:
        session = self.session
        state = self.level_state
        celebrations = tuple(self._celebrations[key] for key in sorted(self._celebrations))
        if state is None:
            return GameSnapshot(
                time_ms=self.now_ms,
                phase=session.phase,
                level=session.level,
                lives=session.lives,
                score=session.score,
                grid=None,
                safe_zone=None,
                player=None,
                pursuers=(),
                collectibles=frozenset(),
                special=None,
                objective=None,
                collected_specials=tuple(session.collected_specials),
                pursuers_frozen=False,
                celebrations=celebrations,
            )
        player = state.player
        special = self.items.special
        objective = self.items.objective
        return GameSnapshot(
            time_ms=self.now_ms,
            phase=session.phase,
            level=session.level,
            lives=session.lives,
            score=session.score,
            grid=state.grid.cells,
            safe_zone=state.grid.safe_zone,
            player=PlayerView(
                position=player.position,
                facing=player.facing,
                in_safe_zone=state.grid.is_in_safe_zone(player.position),
                carrying_objective=player.carrying_objective,
            ),
            pursuers=tuple(
                PursuerView(pursuer_id=p.pursuer_id, position=p.position, frozen=state.frozen)
                for p in state.pursuers
            ),
            collectibles=frozenset(state.collectibles),
            special=None if special is None else SpecialView(special.kind, special.position),
            objective=None if objective is None else objective.position,
            collected_specials=tuple(session.collected_specials),
            pursuers_frozen=state.frozen,
            celebrations=celebrations,
        )

    def _emit(
        self, kind: EventKind, position: Position | None = None, detail: str | None = None
    ) -> None:
        self._events.append(GameEvent(kind=kind, at_ms=self.now_ms, position=position, detail=detail))

    # ------------------------------------------------------------------
    # Level construction
    # ------------------------------------------------------------------

    def _build_level(self, level: int) -> None:
        config = self.config
        settings = config.level_settings(level)
        self.scheduler.cancel_all()

        cells = np.array(
            self.maze_factory(config.maze_width, config.maze_height, self.rng), dtype=bool
        )
        if cells.shape != (config.maze_height, config.maze_width):
            raise ValueError(
                f"maze factory returned shape {cells.shape}, "
                f"expected {(config.maze_height, config.maze_width)}"
            )
        zone = SafeZone.centered(
            config.maze_width, config.maze_height, config.safe_zone_width, config.safe_zone_height
        )
        carve_safe_zone(cells, zone)
        layout = config.pursuer_layout()[: settings.pursuer_count]
        carve_cells(cells, [config.spawn_cell, *layout])
        grid = GridModel(cells, zone)

        ids = IdAllocator()
        player = Player(position=config.spawn_cell)
        self.level_state = LevelState(
            settings=settings,
            grid=grid,
            player=player,
            pursuers=build_roster(config.pursuer_layout(), settings.pursuer_count, ids),
            ids=ids,
            collectibles=self._place_collectibles(grid),
        )
        self.motion = AgentMotionController(player, config.player_tick_ms)
        self.session.level = level
        self.session.phase = GamePhase.PLAYING
        self._celebrations.clear()
        self.items.reset_level(grid)
        self._install_timers()
        self._celebrate(CelebrationKind.SPAWN, config.spawn_celebration_ms)
        self._emit(EventKind.LEVEL_STARTED, detail=str(level))
        logger.info(
            "Level %d started: %d pursuers every %d ms, %d bones",
            level,
            settings.pursuer_count,
            settings.pursuer_period_ms,
            len(self.level_state.collectibles),
        )

    def _place_collectibles(self, grid: GridModel) -> set[Position]:
        eligible = [
            cell
            for cell in grid.open_cells()
            if cell != self.config.spawn_cell and not grid.is_in_safe_zone(cell)
        ]
        bones = {cell for cell in eligible if self.rng.random() < self.config.bone_density}
        if not bones and eligible:
            # a level with nothing to collect would complete on the first step
            bones = {eligible[self.rng.randrange(len(eligible))]}
        return bones

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _install_timers(self) -> None:
        state = self._level()
        self.scheduler.every(TaskKey.PLAYER_TICK, self.config.frame_ms, self._on_frame)
        for pursuer in state.pursuers:
            self._schedule_pursuer(pursuer)
        self.items.activate()

    def _suspend_timers(self) -> None:
        if self.motion is not None:
            self.motion.clear()
        self.scheduler.cancel_keys(*PHASE_GATED_KEYS)
        self.items.suspend()

    def _schedule_pursuer(self, pursuer: Pursuer) -> None:
        state = self._level()
        self.scheduler.every(
            TaskKey.PURSUER_TICK,
            state.settings.pursuer_period_ms,
            partial(self._on_pursuer_tick, pursuer.pursuer_id, self.session.level),
            discriminator=pursuer.pursuer_id,
        )

    def _on_frame(self) -> None:
        if not self._is_playing() or self.motion is None or self.level_state is None:
            return
        if self.motion.update(self.now_ms, self.level_state.grid):
            self._resolve_contacts()

    def _on_pursuer_tick(self, pursuer_id: int, level: int) -> None:
        state = self.level_state
        if state is None or not self._is_playing() or level != self.session.level:
            return
        if state.frozen:
            return
        pursuer = next((p for p in state.pursuers if p.pursuer_id == pursuer_id), None)
        if pursuer is None:
            self.scheduler.cancel(TaskKey.PURSUER_TICK, pursuer_id)
            return
        if self.pursuer_ai.step(pursuer, state.player.position, state.grid):
            self._resolve_contacts()

    # ------------------------------------------------------------------
    # Contact resolution
    # ------------------------------------------------------------------

    def _resolve_contacts(self) -> None:
        """Apply every rule triggered by the current entity positions.

        Runs after any entity changes cell. Each rule re-checks the phase
        because an earlier rule may have ended play.
        """
        if self.level_state is None:
            return
        self._check_collectible()
        self._check_objective_pickup()
        self._check_delivery()
        self._check_pursuer_contact()
        self._check_special_pickup()

    def _check_collectible(self) -> None:
        state = self._level()
        position = state.player.position
        if not self._is_playing() or position not in state.collectibles:
            return
        state.collectibles.discard(position)
        self.session.score += self.config.bone_points
        self._emit(EventKind.BONE_COLLECTED, position)
        if not state.collectibles:
            self._on_collectibles_cleared()

    def _on_collectibles_cleared(self) -> None:
        assert self.motion is not None
        self.motion.clear()
        level = self.session.level
        if level < self.config.max_level:
            self.session.phase = GamePhase.LEVEL_COMPLETE
            self._suspend_timers()
            self._celebrate(CelebrationKind.LEVEL_COMPLETE, None)
            self._emit(EventKind.LEVEL_COMPLETE, detail=str(level))
            logger.info("Level %d complete with score %d", level, self.session.score)
            return
        objective = self.items.spawn_objective()
        self._emit(EventKind.OBJECTIVE_SPAWNED, objective.position)
        logger.info("Objective spawned at %s", objective.position)
        if self.config.pause_on_objective_spawn:
            self.pause()

    def _check_objective_pickup(self) -> None:
        state = self._level()
        player = state.player
        if not self._is_playing() or player.carrying_objective:
            return
        if self.items.take_objective(player.position):
            player.carrying_objective = True
            self.session.score += self.config.objective_points
            self._emit(EventKind.OBJECTIVE_COLLECTED, player.position)

    def _check_delivery(self) -> None:
        state = self._level()
        player = state.player
        if not self._is_playing() or not player.carrying_objective:
            return
        if not state.grid.is_in_safe_zone(player.position):
            return
        player.carrying_objective = False
        self.session.phase = GamePhase.WON
        self._suspend_timers()
        self.scheduler.cancel_all()
        self._celebrations.clear()
        self._celebrate(CelebrationKind.VICTORY, None)
        self._emit(EventKind.VICTORY, player.position)
        logger.info("Session won with score %d", self.session.score)

    def _check_pursuer_contact(self) -> None:
        state = self._level()
        position = state.player.position
        if not self._is_playing() or state.grid.is_in_safe_zone(position):
            return
        hits = [p for p in state.pursuers if p.position == position]
        if not hits:
            return
        if state.frozen:
            for pursuer in hits:
                self._consume_pursuer(pursuer)
        else:
            self._on_caught()

    def _consume_pursuer(self, pursuer: Pursuer) -> None:
        state = self._level()
        state.pursuers.remove(pursuer)
        self.scheduler.cancel(TaskKey.PURSUER_TICK, pursuer.pursuer_id)
        self.session.score += self.config.pursuer_points
        self._celebrate(
            CelebrationKind.PURSUER_CONSUMED, self.config.pursuer_celebration_ms, pursuer.position
        )
        self._emit(EventKind.PURSUER_CONSUMED, pursuer.position, str(pursuer.pursuer_id))
        self.scheduler.schedule(
            TaskKey.PURSUER_RESPAWN,
            self.config.pursuer_respawn_ms,
            partial(self._respawn_pursuer, self.session.level, state.roster_epoch),
            discriminator=pursuer.pursuer_id,
        )

    def _respawn_pursuer(self, level: int, epoch: int) -> None:
        state = self.level_state
        if state is None or level != self.session.level or epoch != state.roster_epoch:
            return
        if self.session.phase not in (GamePhase.PLAYING, GamePhase.PAUSED):
            return
        cell = state.grid.random_walkable_cell_away_from(
            state.player.position,
            self.config.spawn_exclusion_radius,
            self.rng,
            exclude=(self.config.spawn_cell,),
        )
        if cell is None:
            cell = self.config.fallback_cell
        pursuer = Pursuer(pursuer_id=state.ids.next_id(), position=cell)
        state.pursuers.append(pursuer)
        self._emit(EventKind.PURSUER_RESPAWNED, cell, str(pursuer.pursuer_id))
        logger.debug("Pursuer %d respawned at %s", pursuer.pursuer_id, cell)
        if self._is_playing():
            self._schedule_pursuer(pursuer)
            self._resolve_contacts()

    def _on_caught(self) -> None:
        state = self._level()
        self.session.lives -= 1
        self._emit(EventKind.CAUGHT, state.player.position, str(self.session.lives))
        if self.session.lives <= 0:
            self.session.phase = GamePhase.LOST
            self._suspend_timers()
            self.scheduler.cancel_all()
            self._celebrations.clear()
            self._emit(EventKind.DEFEAT)
            logger.info("Session lost on level %d with score %d", self.level, self.score)
            return
        self.session.phase = GamePhase.CAUGHT
        self._suspend_timers()
        logger.info("Caught on level %d, %d lives left", self.level, self.lives)

    def _check_special_pickup(self) -> None:
        state = self._level()
        if not self._is_playing():
            return
        item = self.items.take_special(state.player.position)
        if item is None:
            return
        self.session.score += self.config.special_points
        self.session.collected_specials.append(item.kind)
        self._celebrate(
            CelebrationKind.SPECIAL_PICKUP, self.config.special_celebration_ms, item.position
        )
        self._emit(EventKind.SPECIAL_COLLECTED, item.position, item.kind.value)
        self._freeze_pursuers()

    def _freeze_pursuers(self) -> None:
        state = self._level()
        state.frozen = True
        self.scheduler.schedule(
            TaskKey.FROZEN_EXPIRY,
            self.config.frozen_ms,
            partial(self._unfreeze_pursuers, self.session.level),
        )
        self._emit(EventKind.PURSUERS_FROZEN)

    def _unfreeze_pursuers(self, level: int) -> None:
        state = self.level_state
        if state is None or level != self.session.level or not state.frozen:
            return
        state.frozen = False
        self._emit(EventKind.PURSUERS_UNFROZEN)

    # ------------------------------------------------------------------
    # Celebrations
    # ------------------------------------------------------------------

    def _celebrate(
        self, kind: CelebrationKind, duration_ms: float | None, position: Position | None = None
    ) -> None:
        celebration_id = next(self._celebration_ids)
        expires = None if duration_ms is None else self.now_ms + duration_ms
        self._celebrations[celebration_id] = Celebration(
            celebration_id=celebration_id,
            kind=kind,
            started_ms=self.now_ms,
            expires_ms=expires,
            position=position,
        )
        if duration_ms is not None:
            self.scheduler.schedule(
                TaskKey.CELEBRATION,
                duration_ms,
                partial(self._celebrations.pop, celebration_id, None),
                discriminator=celebration_id,
            )

"""Simulation layer: timers, session state machine, input adapters, headless runs."""

from maze_chase.simulation.autopilot import Autopilot
from maze_chase.simulation.clock import RealtimeDriver, TaskKey, TaskScheduler
from maze_chase.simulation.engine import play_session, run_headless_sessions, summarize_sessions
from maze_chase.simulation.game import GameStateMachine, InvalidTransitionError
from maze_chase.simulation.input import JoystickIntent, KeyboardIntent
from maze_chase.simulation.items import ItemSpawnScheduler
from maze_chase.simulation.persistence import flush_trace_columns
from maze_chase.simulation.snapshot import (
    Celebration,
    CelebrationKind,
    EventKind,
    GameEvent,
    GameSnapshot,
)

__all__ = [
    "Autopilot",
    "Celebration",
    "CelebrationKind",
    "EventKind",
    "GameEvent",
    "GameSnapshot",
    "GameStateMachine",
    "InvalidTransitionError",
    "ItemSpawnScheduler",
    "JoystickIntent",
    "KeyboardIntent",
    "RealtimeDriver",
    "TaskKey",
    "TaskScheduler",
    "flush_trace_columns",
    "play_session",
    "run_headless_sessions",
    "summarize_sessions",
]

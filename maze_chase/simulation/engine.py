"""Headless engine: seeded autopilot sessions with Parquet trace output."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from maze_chase.config.constants import FLUSH_THRESHOLD
from maze_chase.config.types import GameConfig, GamePhase, HeadlessRunConfig, SessionResult
from maze_chase.io.paths import (
    logs_dir,
    session_summary_json_path,
    session_summary_path,
    trace_log_path,
)
from maze_chase.io.schemas import SESSION_SUMMARY_SCHEMA, TRACE_SCHEMA_VERSION
from maze_chase.simulation.autopilot import Autopilot
from maze_chase.simulation.game import GameStateMachine
from maze_chase.simulation.persistence import empty_trace_columns, flush_trace_columns

logger = logging.getLogger(__name__)

TIMEOUT_OUTCOME = "timeout"


def _deterministic_session_id(index: int, seed: int) -> str:
    """Build a session id stable across runs for identical seeds."""
    return f"session{index:04d}_s{seed}"


def _handle_interstitial(game: GameStateMachine) -> None:
    """Dismiss the prompts a human would click through."""
    phase = game.phase
    if phase is GamePhase.CAUGHT:
        game.acknowledge_catch()
    elif phase is GamePhase.LEVEL_COMPLETE:
        game.advance_level()
    elif phase is GamePhase.PAUSED:
        game.resume()


def _record_sample(
    columns: dict[str, list[int | str | float | bool]], session_id: str, game: GameStateMachine
) -> None:
    state = game.level_state
    assert state is not None
    x, y = state.player.position
    columns["session_id"].append(session_id)
    columns["time_ms"].append(float(game.now_ms))
    columns["level"].append(game.level)
    columns["phase"].append(game.phase.value)
    columns["player_x"].append(x)
    columns["player_y"].append(y)
    columns["score"].append(game.score)
    columns["lives"].append(game.lives)
    columns["bones_left"].append(len(state.collectibles))
    columns["n_pursuers"].append(len(state.pursuers))
    columns["frozen"].append(state.frozen)


def play_session(
    game: GameStateMachine,
    max_time_ms: float,
    *,
    session_id: str = "",
    sample_interval_ms: float = 0,
    trace_columns: dict[str, list[int | str | float | bool]] | None = None,
) -> GamePhase:
    """Drive *game* with an autopilot until it ends or *max_time_ms* passes.

    Starts the session if it is still in START. Samples are appended to
    *trace_columns* every *sample_interval_ms* when both are given.
    """
    if game.phase is GamePhase.START:
        game.begin()
    autopilot = Autopilot(game)
    step_ms = game.config.player_tick_ms
    next_sample = 0.0
    sampling = trace_columns is not None and sample_interval_ms > 0
    while not game.phase.is_terminal and game.now_ms < max_time_ms:
        _handle_interstitial(game)
        if sampling and game.now_ms >= next_sample:
            assert trace_columns is not None
            _record_sample(trace_columns, session_id, game)
            next_sample += sample_interval_ms
        autopilot.drive()
        game.advance(min(step_ms, max_time_ms - game.now_ms))
        game.drain_events()
    if sampling:
        assert trace_columns is not None
        _record_sample(trace_columns, session_id, game)
    return game.phase


def run_headless_sessions(
    config: HeadlessRunConfig, game_config: GameConfig | None = None
) -> list[SessionResult]:
    """Play seeded sessions and persist the trace and summary outputs."""
    game_cfg = game_config or GameConfig()
    out_dir = Path(config.out_dir)
    logs_dir(out_dir).mkdir(parents=True, exist_ok=True)

    trace_path = trace_log_path(out_dir)
    trace_writer: pq.ParquetWriter | None = None
    trace_columns = empty_trace_columns()
    results: list[SessionResult] = []

    try:
        for i in range(config.n_sessions):
            seed = config.base_seed + i
            session_id = _deterministic_session_id(i, seed)
            game = GameStateMachine(game_cfg, seed=seed)
            logger.info("Starting %s", session_id)
            final_phase = play_session(
                game,
                config.max_time_ms,
                session_id=session_id,
                sample_interval_ms=config.sample_interval_ms,
                trace_columns=trace_columns,
            )
            if len(trace_columns["session_id"]) >= FLUSH_THRESHOLD:
                trace_writer = flush_trace_columns(trace_columns, trace_path, trace_writer)
            outcome = final_phase.value if final_phase.is_terminal else TIMEOUT_OUTCOME
            result = SessionResult(
                session_id=session_id,
                seed=seed,
                outcome=outcome,
                level_reached=game.level,
                score=game.score,
                lives=game.lives,
                elapsed_ms=float(game.now_ms),
                specials_collected=len(game.session.collected_specials),
            )
            logger.info(
                "Finished %s: %s on level %d with score %d",
                session_id,
                outcome,
                result.level_reached,
                result.score,
            )
            results.append(result)
        trace_writer = flush_trace_columns(trace_columns, trace_path, trace_writer)
    finally:
        if trace_writer is not None:
            trace_writer.close()

    summary_table = pa.Table.from_pylist(
        [asdict(result) for result in results], schema=SESSION_SUMMARY_SCHEMA
    )
    pq.write_table(summary_table, session_summary_path(out_dir))
    session_summary_json_path(out_dir).write_text(
        json.dumps(summarize_sessions(results), ensure_ascii=False, indent=2)
    )
    return results


def summarize_sessions(results: list[SessionResult]) -> dict[str, object]:
    """Aggregate outcome counts and scores for printing or JSON export."""
    outcomes: dict[str, int] = {}
    for result in results:
        outcomes[result.outcome] = outcomes.get(result.outcome, 0) + 1
    scores = [result.score for result in results]
    return {
        "schema_version": TRACE_SCHEMA_VERSION,
        "n_sessions": len(results),
        "outcomes": outcomes,
        "mean_score": sum(scores) / len(scores) if scores else 0.0,
        "max_score": max(scores, default=0),
        "max_level_reached": max((r.level_reached for r in results), default=0),
        "sessions": [asdict(result) for result in results],
    }

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from maze_chase.config.types import GameConfig
from maze_chase.io.paths import resolve_within_base
from maze_chase.simulation.engine import play_session
from maze_chase.simulation.game import GameStateMachine
from maze_chase.simulation.snapshot import GameSnapshot
from maze_chase.viz.render import render_filmstrip, render_snapshot
from maze_chase.viz.theme import get_theme


def capture_snapshots(
    seed: int, times_ms: list[float], game_config: GameConfig | None = None
) -> list[GameSnapshot]:
    """Play one seeded autopilot session, snapshotting at each time in *times_ms*.

    Capture stops early if the session ends before a requested time.
    """
    game = GameStateMachine(game_config, seed=seed)
    snapshots: list[GameSnapshot] = []
    for at_ms in sorted(times_ms):
        play_session(game, at_ms)
        snapshots.append(game.snapshot())
        if game.phase.is_terminal:
            break
    return snapshots


def _build_frame_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("frame", help="Render a single frame of a seeded session")
    p.set_defaults(func=_handle_frame)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--time-ms", type=float, default=5_000)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _build_filmstrip_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("filmstrip", help="Render filmstrip of session frames")
    p.set_defaults(func=_handle_filmstrip)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--duration-ms", type=float, default=60_000)
    p.add_argument("--n-frames", type=int, default=6)
    p.add_argument("--output", type=Path, required=True)
    p.add_argument("--base-dir", type=Path, default=Path("."))


def _handle_frame(args: argparse.Namespace) -> None:
    output = resolve_within_base(args.output, Path(args.base_dir).resolve())
    (snapshot,) = capture_snapshots(args.seed, [args.time_ms])
    render_snapshot(snapshot, output, theme=args.theme)


def _handle_filmstrip(args: argparse.Namespace) -> None:
    if args.n_frames < 1:
        raise ValueError("n_frames must be >= 1")
    output = resolve_within_base(args.output, Path(args.base_dir).resolve())
    step = args.duration_ms / max(1, args.n_frames - 1)
    times = [i * step for i in range(args.n_frames)]
    snapshots = capture_snapshots(args.seed, times)
    render_filmstrip(snapshots, output, theme=args.theme, title=f"Seed {args.seed}")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint with subcommands."""
    parser = argparse.ArgumentParser(description="Visualization tools for maze-chase sessions")
    parser.add_argument(
        "--theme",
        type=str,
        default="default",
        help="Theme preset name (default, paper)",
    )
    parser.add_argument("--log-level", type=str.upper, default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)
    _build_frame_parser(sub)
    _build_filmstrip_parser(sub)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level, logging.WARNING))
    try:
        args.theme = get_theme(args.theme)
    except ValueError as exc:
        parser.error(str(exc))

    args.func(args)


if __name__ == "__main__":
    main()

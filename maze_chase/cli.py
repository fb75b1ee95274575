"""CLI entrypoint for headless autopilot runs.

Supports ``--config path/to/config.json`` for reproducible batches. CLI
arguments override config-file values; config-file values override the
defaults of :class:`GameConfig` and :class:`HeadlessRunConfig`.
"""

from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Callable
from pathlib import Path

from maze_chase.config.types import GameConfig, HeadlessRunConfig
from maze_chase.io.paths import resolve_within_base
from maze_chase.simulation.engine import run_headless_sessions, summarize_sessions

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _coerce_bool(raw: object, key: str) -> bool:
    """Accept JSON booleans and the usual on/off spellings."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        normalized = raw.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{key} must be a boolean value")


def _coerce_int(raw: object, key: str) -> int:
    """Integers, integral floats (``3.0``) and numeric strings; never booleans."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float) and not raw.is_integer():
        raise ValueError(f"{key} must be an integer value, got {raw!r}")
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer value, got {raw!r}") from exc


def _coerce_float(raw: object, key: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"{key} must be a number")
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {raw!r}") from exc


def _coerce_path(raw: object, key: str) -> Path:
    if not isinstance(raw, (str, Path)):
        raise ValueError(f"{key} must be a path string")
    return Path(raw)


# Config-file keys, split by the dataclass they feed. CLI dests use the same names.
GAME_KEYS: dict[str, Callable[[object, str], object]] = {
    "maze_width": _coerce_int,
    "maze_height": _coerce_int,
    "max_level": _coerce_int,
    "starting_lives": _coerce_int,
    "bone_density": _coerce_float,
    "greedy_probability": _coerce_float,
    "pause_on_objective_spawn": _coerce_bool,
}
RUN_KEYS: dict[str, Callable[[object, str], object]] = {
    "n_sessions": _coerce_int,
    "seed": _coerce_int,
    "max_time_ms": _coerce_float,
    "sample_interval_ms": _coerce_float,
    "out_dir": _coerce_path,
}


def _load_file_config(path: Path) -> dict[str, object]:
    """Read and type-check a JSON config; unknown keys are rejected."""
    raw = json.loads(Path(path).read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")
    known = {**GAME_KEYS, **RUN_KEYS}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    return {key: known[key](value, key) for key, value in raw.items()}


def _overrides(
    args: argparse.Namespace,
    keys: dict[str, Callable[[object, str], object]],
    file_cfg: dict[str, object],
) -> dict[str, object]:
    """CLI > file resolution; keys set in neither are left to the dataclass default."""
    resolved: dict[str, object] = {}
    for key in keys:
        cli_val = getattr(args, key)
        if cli_val is not None:
            resolved[key] = cli_val
        elif key in file_cfg:
            resolved[key] = file_cfg[key]
    return resolved


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(description="Play seeded maze-chase sessions headlessly")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    parser.add_argument("--n-sessions", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None, help="Seed of the first session")
    parser.add_argument("--max-time-ms", type=float, default=None)
    parser.add_argument(
        "--sample-interval-ms",
        type=float,
        default=None,
        help="Trace sampling period in simulated ms (0 disables the trace)",
    )
    parser.add_argument("--out-dir", type=Path, default=None)
    parser.add_argument("--base-dir", type=Path, default=Path("."))
    parser.add_argument("--maze-width", type=int, default=None)
    parser.add_argument("--maze-height", type=int, default=None)
    parser.add_argument("--max-level", type=int, default=None)
    parser.add_argument("--starting-lives", type=int, default=None)
    parser.add_argument("--bone-density", type=float, default=None)
    parser.add_argument("--greedy-probability", type=float, default=None)
    parser.add_argument(
        "--pause-on-objective-spawn",
        action=argparse.BooleanOptionalAction,
        default=None,
    )
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for headless runs; prints a JSON summary."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    file_cfg: dict[str, object] = {}
    if args.config is not None:
        try:
            file_cfg = _load_file_config(args.config)
        except FileNotFoundError:
            parser.error(f"Config file not found: {args.config}")
        except json.JSONDecodeError as exc:
            parser.error(f"Config file is not valid JSON: {args.config}: {exc}")
        except ValueError as exc:
            parser.error(str(exc))

    try:
        game_config = GameConfig(**_overrides(args, GAME_KEYS, file_cfg))
        run_settings = _overrides(args, RUN_KEYS, file_cfg)
        if "seed" in run_settings:
            run_settings["base_seed"] = run_settings.pop("seed")
        out_dir = run_settings.pop("out_dir", HeadlessRunConfig.out_dir)
        run_config = HeadlessRunConfig(
            **run_settings, out_dir=resolve_within_base(Path(out_dir), Path(args.base_dir))
        )
    except ValueError as exc:
        parser.error(str(exc))

    results = run_headless_sessions(run_config, game_config)
    summary = summarize_sessions(results)
    summary["out_dir"] = str(run_config.out_dir)
    print(json.dumps(summary, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from maze_chase.cli import _coerce_bool, _coerce_int, main
from maze_chase.config.types import SessionResult


def _fake_results() -> list[SessionResult]:
    return [
        SessionResult(
            session_id="session0000_s0",
            seed=0,
            outcome="timeout",
            level_reached=1,
            score=40,
            lives=3,
            elapsed_ms=1000.0,
            specials_collected=0,
        )
    ]


def test_cli_precedence_cli_over_file_over_default(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"n_sessions": 4, "seed": 9, "starting_lives": 5}))
    argv = ["--config", str(cfg), "--seed", "2", "--base-dir", str(tmp_path)]
    with patch("maze_chase.cli.run_headless_sessions", return_value=_fake_results()) as mock_run:
        main(argv)

    run_config, game_config = mock_run.call_args.args
    assert run_config.n_sessions == 4
    assert run_config.base_seed == 2
    assert run_config.max_time_ms == 600_000
    assert run_config.out_dir == (tmp_path / "data/headless").resolve()
    assert game_config.starting_lives == 5
    assert game_config.maze_width == 21

    summary = json.loads(capsys.readouterr().out)
    assert summary["n_sessions"] == 1
    assert summary["max_score"] == 40
    assert summary["out_dir"] == str(run_config.out_dir)


def test_cli_boolean_flag(tmp_path: Path) -> None:
    argv = ["--no-pause-on-objective-spawn", "--base-dir", str(tmp_path)]
    with patch("maze_chase.cli.run_headless_sessions", return_value=[]) as mock_run:
        main(argv)
    assert mock_run.call_args.args[1].pause_on_objective_spawn is False


def test_cli_missing_config_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--config", str(tmp_path / "missing.json")])


def test_cli_invalid_json_exits(tmp_path: Path) -> None:
    cfg = tmp_path / "bad.json"
    cfg.write_text("{not json")
    with pytest.raises(SystemExit):
        main(["--config", str(cfg)])


def test_cli_invalid_value_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--maze-width", "20", "--base-dir", str(tmp_path)])


def test_cli_out_dir_escape_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--out-dir", "../outside", "--base-dir", str(tmp_path)])


def test_coerce_helpers() -> None:
    assert _coerce_bool("yes", "k") is True
    assert _coerce_bool("off", "k") is False
    with pytest.raises(ValueError):
        _coerce_bool("maybe", "k")
    assert _coerce_int(3.0, "k") == 3
    with pytest.raises(ValueError):
        _coerce_int(3.5, "k")
    with pytest.raises(ValueError):
        _coerce_int(True, "k")


def test_cli_runs_end_to_end(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    argv = ["--max-time-ms", "500", "--out-dir", "run", "--base-dir", str(tmp_path)]
    main(argv)
    summary = json.loads(capsys.readouterr().out)
    assert summary["n_sessions"] == 1
    assert (tmp_path / "run" / "logs" / "session_summary.parquet").exists()
    assert (tmp_path / "run" / "session_summary.json").exists()


def test_cli_file_values_are_coerced(tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text(
        json.dumps({"pause_on_objective_spawn": "off", "maze_width": 23.0, "out_dir": "runs/a"})
    )
    argv = ["--config", str(cfg), "--base-dir", str(tmp_path)]
    with patch("maze_chase.cli.run_headless_sessions", return_value=[]) as mock_run:
        main(argv)
    run_config, game_config = mock_run.call_args.args
    assert game_config.pause_on_objective_spawn is False
    assert game_config.maze_width == 23
    assert run_config.out_dir == (tmp_path / "runs/a").resolve()


def test_cli_unknown_config_key_exits(tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"maze_widht": 23}))
    with pytest.raises(SystemExit):
        main(["--config", str(cfg), "--base-dir", str(tmp_path)])


def test_cli_non_object_config_exits(tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text("[1, 2]")
    with pytest.raises(SystemExit):
        main(["--config", str(cfg), "--base-dir", str(tmp_path)])


def test_cli_badly_typed_file_value_exits(tmp_path: Path) -> None:
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"n_sessions": True}))
    with pytest.raises(SystemExit):
        main(["--config", str(cfg), "--base-dir", str(tmp_path)])

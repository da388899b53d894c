from __future__ import annotations

import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from loggate.cli import app

runner = CliRunner()
NOW = "2024-05-10T12:00:00"


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    yield
    root = logging.getLogger()
    for h in [h for h in root.handlers if getattr(h, "_loggate", False)]:
        root.removeHandler(h)


def setup_repo(tmp_path: Path, lines: list[str], threshold: int = 1) -> Path:
    log_dir = tmp_path / "var" / "log"
    log_dir.mkdir(parents=True)
    (log_dir / "system.log").write_text("".join(l + "\n" for l in lines), encoding="utf-8")
    cfg = tmp_path / "loggate.yaml"
    cfg.write_text(
        "check:\n"
        f"  log_patterns: ['{tmp_path}/var/*/*.log']\n"
        f"  record_stale_threshold: {threshold}\n"
    )
    return cfg


def test_check_fails_on_fresh_error(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["[2024-05-10 11:00:00] main.ERROR: boom [] []"])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW])
    assert result.exit_code == 1
    assert "✘ Logs have recently added records:" in result.output
    assert "system.log - 1 record" in result.output


def test_check_passes_when_only_info(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["[2024-05-10 11:00:00] main.INFO: fine [] []"])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW])
    assert result.exit_code == 0
    assert "log-notification: ok" in result.output


def test_exclude_flag_overrides_config(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["[2024-05-10 11:00:00] main.INFO: fine [] []"])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW, "--exclude", "DEBUG"])
    assert result.exit_code == 1


def test_threshold_flag_overrides_config(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["[2024-05-07 11:00:00] main.ERROR: old [] []"], threshold=1)
    assert runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW]).exit_code == 0
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW, "--threshold", "3"])
    assert result.exit_code == 1


def test_skipped_outside_runnable_context(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["[2024-05-10 11:00:00] main.ERROR: boom [] []"])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW, "--context", "git-commit-msg"])
    assert result.exit_code == 0
    assert "skipped" in result.output


def test_malformed_log_is_a_fault(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["not monolog at all"])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW])
    assert result.exit_code == 2


def test_negative_threshold_is_a_fault(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, [])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--threshold=-1"])
    assert result.exit_code == 2


def test_invalid_config_is_a_fault(tmp_path: Path) -> None:
    cfg = tmp_path / "loggate.yaml"
    cfg.write_text("check:\n  workers: 0\n")
    result = runner.invoke(app, ["check", "--config", str(cfg)])
    assert result.exit_code == 2


def test_doctor_lists_resolved_files(tmp_path: Path) -> None:
    cfg = setup_repo(
        tmp_path,
        ["[2024-05-09 10:00:00] main.INFO: a [] []", "[2024-05-10 11:00:00] main.ERROR: b [] []"],
    )
    result = runner.invoke(app, ["doctor", "--config", str(cfg)])
    assert result.exit_code == 0
    assert "resolved files:     1" in result.output
    assert "records:        2" in result.output
    assert "2024-05-10T11:00:00 ERROR" in result.output


def test_pattern_and_workers_flags_override_config(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, ["[2024-05-10 11:00:00] main.ERROR: boom [] []"])
    other = tmp_path / "other" / "app.log"
    other.parent.mkdir()
    other.write_text("[2024-05-10 10:00:00] main.CRITICAL: down [] []\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["check", "--config", str(cfg), "--now", NOW, "--pattern", str(tmp_path / "other" / "*.log"), "--workers", "2"],
    )
    assert result.exit_code == 1
    assert "app.log - 1 record" in result.output
    assert "system.log" not in result.output


def test_no_exclude_counts_every_severity(tmp_path: Path) -> None:
    cfg = setup_repo(
        tmp_path,
        ["[2024-05-10 10:00:00] main.DEBUG: a [] []", "[2024-05-10 11:00:00] main.INFO: b [] []"],
    )
    assert runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW]).exit_code == 0
    result = runner.invoke(app, ["check", "--config", str(cfg), "--now", NOW, "--no-exclude"])
    assert result.exit_code == 1
    assert "system.log - 2 records" in result.output


def test_no_exclude_conflicts_with_exclude(tmp_path: Path) -> None:
    cfg = setup_repo(tmp_path, [])
    result = runner.invoke(app, ["check", "--config", str(cfg), "--no-exclude", "--exclude", "INFO"])
    assert result.exit_code == 2

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError

from loggate.common.config import AppCfg, CheckCfg, load_config
from loggate.common.log import setup_logging
from loggate.errors import LogGateError
from loggate.scan.verdict import Failed
from loggate.sources.discovery import expand_patterns
from loggate.sources.monolog import MonologReader
from loggate.task import LogNotificationTask

app = typer.Typer(help="loggate: fail a commit or CI run when application logs received recent records")

EXIT_FAILED = 1
EXIT_FAULT = 2


def _load(config: Path) -> AppCfg:
    try:
        return load_config(config)
    except (ValidationError, yaml.YAMLError) as e:
        typer.echo(f"invalid config {config}: {e}", err=True)
        raise typer.Exit(code=EXIT_FAULT)


@app.command()
def check(
    config: Path = typer.Option(Path("configs/loggate.yaml"), "--config", "-c"),
    context: str = typer.Option("run", "--context", help="Execution context, e.g. run or git-pre-commit."),
    pattern: list[str] | None = typer.Option(None, "--pattern", "-p", help="Log glob pattern (repeatable)."),
    threshold: int | None = typer.Option(None, "--threshold", "-t", help="Stale threshold in days."),
    exclude: list[str] | None = typer.Option(None, "--exclude", "-x", help="Severity to ignore (repeatable)."),
    no_exclude: bool = typer.Option(False, "--no-exclude", help="Count every severity, ignoring configured exclusions."),
    workers: int | None = typer.Option(None, "--workers", "-w"),
    now: datetime | None = typer.Option(
        None,
        "--now",
        formats=["%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"],
        help="Evaluate freshness as of this time (default: current local time).",
    ),
) -> None:
    cfg = _load(config)
    setup_logging(cfg.logging, name="loggate")
    log = logging.getLogger("loggate.cli")

    if no_exclude and exclude:
        typer.echo("--exclude and --no-exclude are mutually exclusive", err=True)
        raise typer.Exit(code=EXIT_FAULT)

    overrides = {
        "log_patterns": pattern or None,
        "record_stale_threshold": threshold,
        "exclude_severities": [] if no_exclude else (exclude or None),
        "workers": workers,
    }
    try:
        check_cfg = CheckCfg.model_validate(
            {**cfg.check.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        )
    except ValidationError as e:
        typer.echo(f"invalid option: {e}", err=True)
        raise typer.Exit(code=EXIT_FAULT)

    task = LogNotificationTask(check_cfg)
    if not task.can_run_in_context(context):
        typer.echo(f"{task.name}: skipped in context {context!r}")
        return

    try:
        verdict = task.run(now=now)
    except LogGateError as e:
        log.error("%s aborted: %s", task.name, e)
        typer.echo(f"{task.name}: error: {e}", err=True)
        raise typer.Exit(code=EXIT_FAULT)

    if isinstance(verdict, Failed):
        typer.echo(verdict.message, nl=False)
        raise typer.Exit(code=EXIT_FAILED)
    typer.echo(f"{task.name}: ok")


@app.command()
def doctor(
    config: Path = typer.Option(Path("configs/loggate.yaml"), "--config", "-c"),
) -> None:
    cfg = _load(config)
    setup_logging(cfg.logging, name="loggate")
    print("loggate doctor")
    print(f"  config:             {config} ({'found' if config.exists() else 'missing, using defaults'})")
    print(f"  patterns:           {', '.join(cfg.check.log_patterns)}")
    print(f"  stale threshold:    {cfg.check.record_stale_threshold} day(s)")
    print(f"  excluded:           {', '.join(cfg.check.exclude_severities) or '-'}")

    paths = expand_patterns(cfg.check.log_patterns)
    print(f"  resolved files:     {len(paths)}")
    for p in paths:
        print(f"  - {p}")
        print(f"      readable:       {'yes' if os.access(p, os.R_OK) else 'no'}")
        try:
            with MonologReader(p) as reader:
                n = len(reader)
                print(f"      records:        {n}")
                if n:
                    newest = reader[-1]
                    print(f"      newest:         {newest.timestamp.isoformat()} {newest.severity}")
        except LogGateError as e:
            print(f"      problem:        {e}")


if __name__ == "__main__":
    app()

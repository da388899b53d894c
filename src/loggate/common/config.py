from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


class LoggingCfg(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # None keeps output on stderr only; scanned log dirs must not receive our own log
    dir: Path | None = None
    max_bytes: int = 5_000_000
    backups: int = 3


class CheckCfg(BaseModel):
    log_patterns: list[str] = Field(default_factory=lambda: ["./var/*/*.log"])
    record_stale_threshold: int = Field(default=1, ge=0)
    exclude_severities: list[str] = Field(default_factory=lambda: ["INFO", "DEBUG"])
    workers: int = Field(default=1, ge=1)
    timeout_s: float | None = Field(default=None, gt=0)
    check_order: bool = False


class AppCfg(BaseModel):
    logging: LoggingCfg = Field(default_factory=LoggingCfg)
    check: CheckCfg = Field(default_factory=CheckCfg)


def load_config(path: Path) -> AppCfg:
    data: dict[str, Any] = {}
    if path.exists():
        data = yaml.safe_load(path.read_text()) or {}
    return AppCfg.model_validate(data)

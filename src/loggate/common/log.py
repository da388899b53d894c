from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import LoggingCfg


def setup_logging(cfg: LoggingCfg, name: str) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel(getattr(logging, cfg.level))

    # repeated setup replaces our handlers instead of stacking them
    for h in [h for h in root.handlers if getattr(h, "_loggate", False)]:
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)sZ %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    sh._loggate = True  # type: ignore[attr-defined]
    root.addHandler(sh)

    if cfg.dir is not None:
        cfg.dir.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(
            Path(cfg.dir) / f"{name}.log",
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backups,
            encoding="utf-8",
        )
        fh.setFormatter(fmt)
        fh._loggate = True  # type: ignore[attr-defined]
        root.addHandler(fh)

    return logging.getLogger(name)

from __future__ import annotations

import logging
import threading
from datetime import datetime
from functools import partial

from loggate.common.config import CheckCfg
from loggate.scan.report import aggregate
from loggate.scan.scanner import scan
from loggate.scan.verdict import Failed, Verdict, format_report
from loggate.sources.discovery import expand_patterns
from loggate.sources.monolog import MonologReader

log = logging.getLogger("loggate.task")

RUNNABLE_CONTEXTS = frozenset({"run", "git-pre-commit"})


class LogNotificationTask:
    """Notify about records recently added to application logs."""

    name = "log-notification"

    def __init__(self, cfg: CheckCfg | None = None) -> None:
        self.cfg = cfg or CheckCfg()

    def can_run_in_context(self, context: str) -> bool:
        return context in RUNNABLE_CONTEXTS

    def scan_file(self, path: str, now: datetime, cancel: threading.Event | None = None) -> int:
        with MonologReader(path) as reader:
            return scan(
                reader,
                now,
                self.cfg.record_stale_threshold,
                frozenset(self.cfg.exclude_severities),
                check_order=self.cfg.check_order,
                name=path,
                cancel=cancel,
            )

    def run(self, now: datetime | None = None) -> Verdict:
        now = now or datetime.now()
        paths = expand_patterns(self.cfg.log_patterns)
        log.info(
            "%s: %d log file(s) from %d pattern(s), threshold=%dd exclude=%s",
            self.name,
            len(paths),
            len(self.cfg.log_patterns),
            self.cfg.record_stale_threshold,
            ",".join(self.cfg.exclude_severities) or "-",
        )

        cancel = threading.Event()
        report = aggregate(
            paths,
            partial(self.scan_file, now=now, cancel=cancel),
            workers=self.cfg.workers,
            timeout_s=self.cfg.timeout_s,
            cancel=cancel,
        )
        verdict = format_report(report)
        log.info(
            "%s: %s (%d file(s) with recent records)",
            self.name,
            "failed" if isinstance(verdict, Failed) else "passed",
            len(report),
        )
        return verdict

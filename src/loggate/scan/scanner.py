from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import AbstractSet

from loggate.errors import ScanCancelled
from loggate.sources.base import LogRecordSource

log = logging.getLogger("loggate.scan")


def _comparable(ts: datetime, now: datetime) -> tuple[datetime, datetime]:
    # naive timestamps are local wall-clock time; only convert when mixed
    if (ts.tzinfo is None) != (now.tzinfo is None):
        return ts.astimezone(), now.astimezone()
    return ts, now


def age_days(ts: datetime, now: datetime) -> int:
    """Whole days between ts and now, ignoring direction."""
    ts, now = _comparable(ts, now)
    return abs(now - ts).days


def scan(
    source: LogRecordSource,
    now: datetime,
    stale_threshold_days: int,
    excluded_severities: AbstractSet[str],
    *,
    check_order: bool = False,
    name: str = "-",
    cancel: threading.Event | None = None,
) -> int:
    """
    Count fresh, non-excluded records walking from the newest record backward.

    The walk stops at the first record older than stale_threshold_days. This is
    only correct if the source is ordered by timestamp (oldest first); an
    unordered source undercounts. check_order=True logs a warning when a
    newer record is found behind an older one, without changing the count.

    Excluded severities are skipped but never stop the walk.

    cancel is checked before every record; once set, the scan raises
    ScanCancelled instead of reading further.
    """
    n = len(source)
    count = 0
    newer: datetime | None = None
    warned = False

    for i in range(n - 1, -1, -1):
        if cancel is not None and cancel.is_set():
            raise ScanCancelled(name)
        record = source[i]

        if check_order and not warned:
            if newer is not None:
                a, b = _comparable(record.timestamp, newer)
                if a > b:
                    log.warning(
                        "source %s is not timestamp-ordered near record %d (line %d); counts may be low",
                        name,
                        i,
                        record.line_no,
                    )
                    warned = True
            newer = record.timestamp

        if age_days(record.timestamp, now) > stale_threshold_days:
            break

        if record.severity in excluded_severities:
            continue

        count += 1

    return count

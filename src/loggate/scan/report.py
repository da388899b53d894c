from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Sequence

from loggate.errors import ScanTimeout

log = logging.getLogger("loggate.report")

# path -> fresh record count; insertion order is encounter order, never holds 0
Report = dict[str, int]


@dataclass(frozen=True)
class ScanOutcome:
    path: str
    fresh_count: int


def _scan_sequential(paths: Sequence[str], scan: Callable[[str], int]) -> list[ScanOutcome]:
    return [ScanOutcome(path=p, fresh_count=scan(p)) for p in paths]


def _scan_pooled(
    paths: Sequence[str],
    scan: Callable[[str], int],
    workers: int,
    timeout_s: float | None,
    cancel: threading.Event | None,
) -> list[ScanOutcome]:
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="loggate-scan")
    try:
        futures = [pool.submit(scan, p) for p in paths]
        done, pending = wait(futures, timeout=timeout_s, return_when=FIRST_EXCEPTION)

        # first failure by input position, not by completion
        for fut in futures:
            if fut in done and fut.exception() is not None:
                if cancel is not None:
                    cancel.set()
                raise fut.exception()
        if pending:
            # running scans only stop if they watch the cancel flag
            if cancel is not None:
                cancel.set()
            raise ScanTimeout(float(timeout_s), len(done), len(paths))

        # slot by original index so completion order cannot reorder the report
        return [ScanOutcome(path=p, fresh_count=f.result()) for p, f in zip(paths, futures)]
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def aggregate(
    paths: Sequence[str],
    scan: Callable[[str], int],
    *,
    workers: int = 1,
    timeout_s: float | None = None,
    cancel: threading.Event | None = None,
) -> Report:
    """
    Scan every path once and keep the ones with a non-zero count, in input order.

    Paths are expected to be de-duplicated already. Any scan error aborts the
    whole run; nothing is reported partially.

    With timeout_s set, scans run on worker threads (one worker unless
    workers > 1) and the run raises ScanTimeout at the deadline. cancel is set
    at that point; scan callables that check it (see scanner.scan) stop
    reading, so no worker outlives the run for long.
    """
    paths = list(paths)
    if paths and (timeout_s is not None or workers > 1):
        outcomes = _scan_pooled(paths, scan, max(1, min(workers, len(paths))), timeout_s, cancel)
    else:
        outcomes = _scan_sequential(paths, scan)

    report: Report = {}
    for o in outcomes:
        log.debug("scanned %s fresh=%d", o.path, o.fresh_count)
        if o.fresh_count > 0:
            report[o.path] = o.fresh_count
    return report

from __future__ import annotations


class LogGateError(Exception):
    """Base for run-aborting faults (distinct from a failed verdict)."""


class SourceUnavailable(LogGateError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"log source unavailable: {path} ({reason})")
        self.path = path
        self.reason = reason


class MalformedRecord(LogGateError):
    def __init__(self, path: str, line_no: int, reason: str) -> None:
        super().__init__(f"malformed record in {path} at line {line_no}: {reason}")
        self.path = path
        self.line_no = line_no
        self.reason = reason


class ScanTimeout(LogGateError):
    def __init__(self, timeout_s: float, done: int, total: int) -> None:
        super().__init__(f"scan exceeded {timeout_s:.1f}s deadline ({done}/{total} files scanned)")
        self.timeout_s = timeout_s
        self.done = done
        self.total = total


class ScanCancelled(LogGateError):
    def __init__(self, name: str) -> None:
        super().__init__(f"scan of {name} cancelled")
        self.name = name

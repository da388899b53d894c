from __future__ import annotations

from typing import Protocol

from loggate.common.schema import LogRecord


class LogRecordSource(Protocol):
    """
    Fixed-length, index-addressable view of a log file's records in append order.

    Precondition relied on by the scanner: record timestamps are non-decreasing
    from index 0 to len-1.
    """
    def __len__(self) -> int: ...

    def __getitem__(self, index: int) -> LogRecord: ...

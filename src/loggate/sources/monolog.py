from __future__ import annotations

import os
import re
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from loggate.common.schema import LogRecord
from loggate.errors import MalformedRecord, SourceUnavailable

# Monolog LineFormatter: "[%datetime%] %channel%.%level_name%: %message% %context% %extra%"
RECORD_HEADER = re.compile(
    r"^\[(?P<date>[^\]]+)\] (?P<channel>[\w.-]+)\.(?P<level>[A-Z]+): (?P<message>.*)$"
)


def parse_ts(ts: str) -> datetime:
    ts = ts.strip()
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    return datetime.fromisoformat(ts)


class MonologReader:
    """
    Random-access reader over a Monolog log file.

    The file is indexed once on open (byte offset of every record header);
    reader[i] seeks and parses only that record. Lines that do not start a
    record (stack traces, wrapped JSON) belong to the record above them.
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self.path = str(path)
        self.encoding = encoding
        self._offsets: list[int] = []
        self._line_nos: list[int] = []
        self._end = 0
        self._f: BinaryIO | None = None

        if not os.path.isfile(self.path):
            reason = "not a regular file" if os.path.exists(self.path) else "no such file"
            raise SourceUnavailable(self.path, reason)
        try:
            self._f = open(self.path, "rb")
        except OSError as e:
            raise SourceUnavailable(self.path, f"{type(e).__name__}: {e}") from e

        try:
            self._build_index()
        except BaseException:
            self.close()
            raise

    def _build_index(self) -> None:
        assert self._f is not None
        line_no = 0
        while True:
            offset = self._f.tell()
            raw = self._f.readline()
            if not raw:
                self._end = offset
                break
            line_no += 1
            line = raw.decode(self.encoding, errors="replace").rstrip("\r\n")
            if RECORD_HEADER.match(line):
                self._offsets.append(offset)
                self._line_nos.append(line_no)
            elif not self._offsets and line.strip():
                raise MalformedRecord(self.path, line_no, "content before first record header")

    def __len__(self) -> int:
        return len(self._offsets)

    def __getitem__(self, index: int) -> LogRecord:
        if self._f is None:
            raise ValueError(f"reader for {self.path} is closed")
        n = len(self._offsets)
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError(f"record index {index} out of range ({n} records)")

        start = self._offsets[index]
        self._f.seek(start)
        # lines appended after indexing are not part of this view
        stop = self._offsets[index + 1] if index + 1 < n else self._end
        chunk = self._f.read(stop - start)

        lines = chunk.decode(self.encoding, errors="replace").splitlines()
        line_no = self._line_nos[index]
        m = RECORD_HEADER.match(lines[0])
        if not m:
            raise MalformedRecord(self.path, line_no, "record header changed since indexing")

        try:
            ts = parse_ts(m.group("date"))
        except ValueError as e:
            raise MalformedRecord(self.path, line_no, f"bad timestamp {m.group('date')!r}") from e

        content = "\n".join([m.group("message"), *lines[1:]]).rstrip()
        return LogRecord(
            timestamp=ts,
            severity=m.group("level"),
            content=content,
            channel=m.group("channel"),
            line_no=line_no,
        )

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
            self._f = None

    @property
    def closed(self) -> bool:
        return self._f is None

    def __enter__(self) -> "MonologReader":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LogRecord(BaseModel):
    """
    One parsed log entry.

    NOTE:
    - timestamp may be naive (local time) or aware, depending on what the log wrote.
    - content holds the full message including any continuation lines.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    severity: str
    content: str
    channel: str | None = None
    line_no: int = 0

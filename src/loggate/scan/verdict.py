from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

HEADER = "✘ Logs have recently added records:"


@dataclass(frozen=True)
class Passed:
    pass


@dataclass(frozen=True)
class Failed:
    message: str


Verdict = Union[Passed, Failed]


def format_report(report: Mapping[str, int]) -> Verdict:
    if not report:
        return Passed()

    lines = [HEADER]
    for path, count in report.items():
        unit = "record" if count == 1 else "records"
        lines.append(f"• {path} - {count} {unit}")
    return Failed(message="".join(line + "\n" for line in lines))

from __future__ import annotations

import glob
import logging
from typing import Iterable

log = logging.getLogger("loggate.discovery")


def expand_patterns(patterns: Iterable[str]) -> list[str]:
    """Expand glob patterns into an ordered, de-duplicated list of paths (first match wins)."""
    seen: dict[str, None] = {}
    for pattern in patterns:
        matches = sorted(glob.glob(pattern, recursive=True))
        log.debug("pattern %s matched %d path(s)", pattern, len(matches))
        for m in matches:
            seen.setdefault(m, None)
    return list(seen)

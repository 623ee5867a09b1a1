"""Wall-clock helper shared by the timestamped collections."""

from __future__ import annotations

import time

__all__ = ["now_ms"]


def now_ms() -> int:
    """Milliseconds since the Unix epoch."""

    return time.time_ns() // 1_000_000

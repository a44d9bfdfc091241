"""Time utilities for gelfsend."""

from __future__ import annotations

import time

__all__ = ["now_millis", "millis_from_seconds"]


def now_millis() -> int:
    """Return the current time as integer milliseconds since the epoch."""

    return int(time.time() * 1000)


def millis_from_seconds(seconds: float) -> int:
    return int(round(seconds * 1000))

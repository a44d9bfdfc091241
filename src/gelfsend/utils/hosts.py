"""Hostname helpers."""

from __future__ import annotations

import socket
from functools import lru_cache

__all__ = ["local_hostname"]


@lru_cache(maxsize=1)
def local_hostname() -> str:
    """Return the name of the local host, falling back to ``localhost``."""

    try:
        name = socket.gethostname()
    except OSError:
        return "localhost"
    return name or "localhost"

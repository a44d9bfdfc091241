"""Console handler used for command line output."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import TextIO

__all__ = ["ConsoleHandlerConfig", "build_console_handler"]


@dataclass(slots=True)
class ConsoleHandlerConfig:
    """Configuration for console handlers."""

    stream: str = "stderr"
    level: int = logging.INFO
    fmt: str = "%(message)s"


def _resolve_stream(name: str) -> TextIO:
    if name == "stdout":
        return sys.stdout
    if name == "stderr":
        return sys.stderr
    raise ValueError(f"Unknown console stream: {name!r}")


def build_console_handler(config: ConsoleHandlerConfig | None = None) -> logging.Handler:
    """Construct a :class:`logging.StreamHandler` writing plain messages."""

    cfg = config or ConsoleHandlerConfig()
    handler = logging.StreamHandler(stream=_resolve_stream(cfg.stream))
    handler.setLevel(cfg.level)
    handler.setFormatter(logging.Formatter(cfg.fmt))
    return handler

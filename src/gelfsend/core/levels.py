"""Syslog severity levels used by GELF."""

from __future__ import annotations

import logging
from enum import IntEnum

__all__ = [
    "SyslogLevel",
    "ensure_level",
    "ensure_logging_level",
    "from_logging_level",
    "get_level_by_name",
]


class SyslogLevel(IntEnum):
    """Syslog severities, most severe first."""

    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


_ALIASES = {
    "EMERGENCY": SyslogLevel.EMERG,
    "CRITICAL": SyslogLevel.CRIT,
    "ERROR": SyslogLevel.ERR,
    "WARN": SyslogLevel.WARNING,
}


def get_level_by_name(name: str) -> SyslogLevel:
    """Resolve a severity from a name such as ``ERR`` or a digit string."""

    stripped = name.strip()
    if stripped.isdigit():
        return SyslogLevel(int(stripped))
    key = stripped.upper()
    if key in SyslogLevel.__members__:
        return SyslogLevel[key]
    if key in _ALIASES:
        return _ALIASES[key]
    raise ValueError(f"Unknown syslog level: {name!r}")


def ensure_level(value: int | str | SyslogLevel) -> SyslogLevel:
    """Normalize user supplied level values.

    Integers must lie within 0-7; strings may be symbolic names or digits.
    """

    if isinstance(value, SyslogLevel):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid syslog level: {value!r}")
    if isinstance(value, int):
        return SyslogLevel(value)
    return get_level_by_name(str(value))


def from_logging_level(levelno: int) -> SyslogLevel:
    """Map a stdlib ``logging`` level number onto the syslog scale."""

    if levelno >= logging.CRITICAL:
        return SyslogLevel.CRIT
    if levelno >= logging.ERROR:
        return SyslogLevel.ERR
    if levelno >= logging.WARNING:
        return SyslogLevel.WARNING
    if levelno >= logging.INFO:
        return SyslogLevel.INFO
    return SyslogLevel.DEBUG


def ensure_logging_level(value: int | str) -> int:
    """Normalize a stdlib ``logging`` level given as a number or name."""

    if isinstance(value, int):
        return value
    name = str(value).strip()
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name.upper())
    if isinstance(resolved, int):
        return resolved
    raise ValueError(f"Unknown logging level: {value!r}")

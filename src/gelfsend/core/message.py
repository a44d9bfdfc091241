"""GELF message model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..utils.time import now_millis
from .levels import SyslogLevel, ensure_level

__all__ = [
    "GELF_VERSION",
    "RESERVED_FIELDS",
    "SHORT_MESSAGE_LENGTH",
    "TRUNCATION_MARKER",
    "GELFMessage",
    "coerce_field_value",
    "is_valid_field_name",
    "truncate_short_message",
]

GELF_VERSION = "1.0"
SHORT_MESSAGE_LENGTH = 250
TRUNCATION_MARKER = "..."

RESERVED_FIELDS = frozenset(
    {
        "version",
        "host",
        "short_message",
        "full_message",
        "timestamp",
        "level",
        "facility",
        "file",
        "line",
        "id",
    }
)

Scalar = str | int | float | bool


def truncate_short_message(message: str, limit: int = SHORT_MESSAGE_LENGTH) -> str:
    """Shorten ``message`` to at most ``limit`` characters.

    Truncated messages end with :data:`TRUNCATION_MARKER`, which counts
    towards the limit.
    """

    if len(message) <= limit:
        return message
    if limit <= len(TRUNCATION_MARKER):
        return message[:limit]
    return message[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def is_valid_field_name(name: str) -> bool:
    """Return ``True`` when ``name`` may be used as an additional field."""

    return bool(name) and not name.startswith("_") and name not in RESERVED_FIELDS


def coerce_field_value(value: Any) -> Scalar | None:
    """Return ``value`` as a JSON scalar, or ``None`` when it must be dropped."""

    if value is None:
        return None
    if isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return str(value)
        return value
    return str(value)


@dataclass(slots=True)
class GELFMessage:
    """A single log record in GELF shape.

    ``timestamp_ms`` holds milliseconds since the epoch; :attr:`timestamp`
    exposes it as fractional seconds the way GELF expects. Additional fields
    are keyed without the leading underscore the wire format adds.
    """

    short_message: str = ""
    host: str | None = None
    full_message: str | None = None
    timestamp_ms: int = field(default_factory=now_millis)
    level: SyslogLevel = SyslogLevel.ALERT
    facility: str | None = None
    file: str | None = None
    line: int | None = None
    additional_fields: Dict[str, Scalar] = field(default_factory=dict)
    version: str = GELF_VERSION

    def __post_init__(self) -> None:
        self.short_message = truncate_short_message(self.short_message or "")
        self.level = ensure_level(self.level)
        fields = dict(self.additional_fields)
        self.additional_fields = {}
        self.update_fields(fields)

    @property
    def timestamp(self) -> float:
        return self.timestamp_ms / 1000.0

    def set_short_message(self, message: str) -> None:
        self.short_message = truncate_short_message(message or "")

    def add_field(self, key: str, value: Any) -> bool:
        """Attach an additional field.

        Reserved, empty and underscore-prefixed keys are dropped, as are
        ``None`` values. Returns whether the field was stored.
        """

        if not is_valid_field_name(key):
            return False
        coerced = coerce_field_value(value)
        if coerced is None:
            return False
        self.additional_fields[key] = coerced
        return True

    def update_fields(self, fields: Mapping[str, Any]) -> None:
        for key, value in fields.items():
            self.add_field(str(key), value)

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation as a plain mapping.

        Truncation and the field rules are applied again here, so attributes
        edited after construction still serialize to a valid document.
        """

        payload: Dict[str, Any] = {
            "version": self.version,
            "host": self.host,
            "short_message": truncate_short_message(self.short_message or ""),
            "timestamp": round(self.timestamp, 3),
            "level": int(ensure_level(self.level)),
        }
        if self.full_message is not None:
            payload["full_message"] = self.full_message
        if self.facility is not None:
            payload["facility"] = self.facility
        if self.file is not None:
            payload["file"] = self.file
        if self.line is not None:
            payload["line"] = self.line
        for key, value in self.additional_fields.items():
            key = str(key)
            coerced = coerce_field_value(value)
            if coerced is None or not is_valid_field_name(key):
                continue
            payload[f"_{key}"] = coerced
        return payload

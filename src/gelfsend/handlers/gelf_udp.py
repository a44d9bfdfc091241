"""GELF UDP handler implementation."""

from __future__ import annotations

import logging
from typing import Callable

from ..config.schema import HandlerOptions, TargetConfig
from ..core.connection import GELFConnection
from ..core.context import record_context, record_ndc
from ..core.errors import GELFError
from ..core.levels import ensure_logging_level, from_logging_level
from ..core.message import GELFMessage
from ..utils.time import millis_from_seconds, now_millis

__all__ = ["GELFUDPHandler", "build_gelf_udp_handler", "current_timestamp", "record_timestamp"]

LOGGER_NAME_FIELD = "logger"
LOGGER_NDC_FIELD = "loggerNdc"
THREAD_NAME_FIELD = "thread"
TIMESTAMP_MS_FIELD = "timestampMs"
STACKTRACE_SEPARATOR = "\n\r"

TimestampSource = Callable[[logging.LogRecord], int]


def record_timestamp(record: logging.LogRecord) -> int:
    """Creation time of ``record`` in milliseconds."""

    return millis_from_seconds(record.created)


def current_timestamp(record: logging.LogRecord) -> int:
    return now_millis()


class _OwnRecordsFilter(logging.Filter):
    """Drop records emitted by gelfsend itself."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return not (record.name == "gelfsend" or record.name.startswith("gelfsend."))


class GELFUDPHandler(logging.Handler):
    """Send log records to a GELF collector over UDP.

    The connection is opened on construction, so configuration errors surface
    immediately, and released by :meth:`close`.
    """

    def __init__(
        self,
        target: TargetConfig | None = None,
        *,
        extract_stacktrace: bool = True,
        add_extended_information: bool = False,
        timestamp_source: TimestampSource | None = None,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self.connection = GELFConnection(target)
        self.extract_stacktrace = extract_stacktrace
        self.add_extended_information = add_extended_information
        self.timestamp_source: TimestampSource = timestamp_source or record_timestamp
        self.addFilter(_OwnRecordsFilter())
        self.connection.open()

    @property
    def target(self) -> TargetConfig:
        return self.connection.target

    def make_message(self, record: logging.LogRecord) -> GELFMessage:
        """Translate ``record`` into a :class:`GELFMessage`."""

        rendered = record.getMessage() or ""
        full_message = rendered
        if self.extract_stacktrace and record.exc_info:
            formatter = self.formatter or logging.Formatter()
            full_message += STACKTRACE_SEPARATOR + formatter.formatException(record.exc_info)

        timestamp_ms = self.timestamp_source(record)
        message = self.connection.new_message(
            from_logging_level(record.levelno),
            rendered,
            full_message=full_message,
            timestamp_ms=timestamp_ms,
        )
        message.file = record.pathname or None
        message.line = record.lineno or None

        if self.add_extended_information:
            message.add_field(THREAD_NAME_FIELD, record.threadName)
            message.add_field(LOGGER_NAME_FIELD, record.name)
            message.add_field(TIMESTAMP_MS_FIELD, str(timestamp_ms))
            message.update_fields(record_context(record))
            ndc = record_ndc(record)
            if ndc is not None:
                message.add_field(LOGGER_NDC_FIELD, ndc)
        return message

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            message = self.make_message(record)
            if not self.connection.send(message):
                raise GELFError("Could not send GELF message")
        except Exception:
            self.handleError(record)

    def close(self) -> None:  # type: ignore[override]
        self.acquire()
        try:
            self.connection.close()
        finally:
            self.release()
        super().close()


def build_gelf_udp_handler(
    target: TargetConfig | None = None,
    options: HandlerOptions | None = None,
) -> GELFUDPHandler:
    """Build a handler from target and handler options."""

    opts = options or HandlerOptions()
    return GELFUDPHandler(
        target,
        extract_stacktrace=opts.extract_stacktrace,
        add_extended_information=opts.add_extended_information,
        level=ensure_logging_level(opts.level),
    )

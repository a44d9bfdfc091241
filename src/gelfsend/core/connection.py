"""UDP connection that ships GELF messages to a collector."""

from __future__ import annotations

import socket
import threading
from enum import Enum
from typing import Any, List, Mapping

from ..config.schema import TargetConfig
from ..formatters.gelf import encode_message
from .chunker import split_payload
from .compression import compress
from .errors import ConfigurationError, ConnectionStateError, MessageTooLargeError
from .levels import SyslogLevel, ensure_level
from .message import GELFMessage
from .validation import validate_target

__all__ = ["ConnectionState", "GELFConnection"]


class ConnectionState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


class GELFConnection:
    """A bound UDP socket plus the collector address it sends to.

    Sends are serialized with a lock so chunk sequences of two messages never
    interleave on the shared socket. ``send`` reports whether every datagram
    was handed to the OS; it never retries.
    """

    def __init__(self, target: TargetConfig | None = None) -> None:
        self.target = target or TargetConfig()
        self._state = ConnectionState.UNOPENED
        self._sock: socket.socket | None = None
        self._address: Any = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN

    @property
    def address(self) -> Any:
        """Resolved socket address of the collector, once open."""

        return self._address

    # ------------------------------------------------------------------
    def open(self) -> "GELFConnection":
        """Resolve the collector address and create the socket."""

        with self._lock:
            if self._state is ConnectionState.OPEN:
                return self
            if self._state is ConnectionState.CLOSED:
                raise ConnectionStateError("Cannot reopen a closed connection")

            validate_target(self.target)
            try:
                infos = socket.getaddrinfo(self.target.host, self.target.port, 0, socket.SOCK_DGRAM)
            except (socket.gaierror, UnicodeError) as exc:
                raise ConfigurationError(f"Unable to resolve GELF host '{self.target.host}': {exc}") from exc
            if not infos:
                raise ConfigurationError(f"Unable to resolve GELF host '{self.target.host}'")

            family, socktype, proto, _, sockaddr = infos[0]
            try:
                sock = socket.socket(family, socktype, proto)
            except OSError as exc:
                raise ConfigurationError(f"Unable to create UDP socket: {exc}") from exc

            self._sock = sock
            self._address = sockaddr
            self._state = ConnectionState.OPEN
            return self

    def close(self) -> None:
        """Release the socket. Safe to call in any state."""

        with self._lock:
            sock, self._sock = self._sock, None
            if self._state is ConnectionState.OPEN:
                self._state = ConnectionState.CLOSED
            if sock is not None:
                sock.close()

    def __enter__(self) -> "GELFConnection":
        return self.open()

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()

    # ------------------------------------------------------------------
    def new_message(
        self,
        level: int | str | SyslogLevel,
        short_message: str,
        *,
        full_message: str | None = None,
        timestamp_ms: int | None = None,
        fields: Mapping[str, Any] | None = None,
    ) -> GELFMessage:
        """Build a message pre-filled with the target's origin host, facility and static fields."""

        message = GELFMessage(
            short_message=short_message,
            full_message=full_message,
            host=self.target.origin_host,
            facility=self.target.facility,
            level=ensure_level(level),
        )
        if timestamp_ms is not None:
            message.timestamp_ms = timestamp_ms
        message.update_fields(self.target.additional_fields)
        if fields:
            message.update_fields(fields)
        return message

    def encode(self, message: GELFMessage) -> List[bytes]:
        """Return the datagrams that carry ``message``, in send order.

        Raises :class:`MessageTooLargeError` when the message cannot be sent.
        """

        return self._datagrams(encode_message(message))

    def send(self, message: GELFMessage) -> bool:
        """Encode and transmit ``message``."""

        self._ensure_open()
        return self.send_bytes(encode_message(message))

    def send_bytes(self, payload: bytes) -> bool:
        """Transmit an already encoded JSON document."""

        self._ensure_open()
        try:
            datagrams = self._datagrams(payload)
        except MessageTooLargeError:
            return False

        with self._lock:
            sock = self._sock
            if sock is None:
                raise ConnectionStateError("Connection was closed")
            try:
                for datagram in datagrams:
                    sock.sendto(datagram, self._address)
            except OSError:
                return False
        return True

    # ------------------------------------------------------------------
    def _ensure_open(self) -> None:
        if self._state is not ConnectionState.OPEN:
            raise ConnectionStateError(f"Connection is {self._state.value}, not open")

    def _datagrams(self, payload: bytes) -> List[bytes]:
        ceiling = self.target.max_datagram_size
        if len(payload) <= ceiling:
            return [payload]

        compressed = self.target.compressed_chunking
        if compressed:
            payload = compress(payload)
        chunked = split_payload(payload, ceiling, compressed_chunking=compressed)
        if chunked is None:
            return [payload]
        return list(chunked.chunks)

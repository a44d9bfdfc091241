"""Exception types raised by gelfsend."""

from __future__ import annotations

__all__ = [
    "GELFError",
    "ConfigurationError",
    "EncodingError",
    "MessageTooLargeError",
    "ConnectionStateError",
]


class GELFError(Exception):
    """Base class for all gelfsend errors."""


class ConfigurationError(GELFError, ValueError):
    """Raised when the target configuration is invalid or unresolvable."""


class EncodingError(GELFError):
    """Raised when a message lacks a field that GELF requires."""


class MessageTooLargeError(GELFError):
    """Raised when a payload needs more chunks than the protocol allows."""

    def __init__(self, size: int, chunks: int, limit: int) -> None:
        super().__init__(
            f"Payload of {size} bytes needs {chunks} chunks, more than the maximum of {limit}"
        )
        self.size = size
        self.chunks = chunks
        self.limit = limit


class ConnectionStateError(GELFError, RuntimeError):
    """Raised when a connection is used outside of its open state."""

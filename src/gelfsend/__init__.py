"""gelfsend public API."""

from .api import configure, get_context_logger, get_logger, open_connection, shutdown
from .config.schema import TargetConfig
from .core.connection import GELFConnection
from .core.errors import (
    ConfigurationError,
    ConnectionStateError,
    EncodingError,
    GELFError,
    MessageTooLargeError,
)
from .core.levels import SyslogLevel
from .core.message import GELFMessage
from .handlers.gelf_udp import GELFUDPHandler
from .version import __version__

__all__ = [
    "configure",
    "get_logger",
    "get_context_logger",
    "open_connection",
    "shutdown",
    "ConfigurationError",
    "ConnectionStateError",
    "EncodingError",
    "GELFConnection",
    "GELFError",
    "GELFMessage",
    "GELFUDPHandler",
    "MessageTooLargeError",
    "SyslogLevel",
    "TargetConfig",
    "__version__",
]

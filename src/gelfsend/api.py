"""Public API surface for gelfsend."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .config.loader import load_configuration
from .config.schema import TargetConfig
from .core.connection import GELFConnection
from .core.context import ContextAdapter
from .core.manager import GLOBAL_MANAGER

_CONFIGURED = False


def configure(overrides: Dict[str, Any] | None = None) -> None:
    """Configure gelfsend using the provided overrides."""

    global _CONFIGURED
    config = load_configuration(overrides or {})
    GLOBAL_MANAGER.configure(config)
    _CONFIGURED = True


def _ensure_configured() -> None:
    if not _CONFIGURED:
        configure({})


def get_logger(name: str) -> logging.Logger:
    """Return a logger whose records reach the GELF collector."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_logger(name)


def get_context_logger(name: str, **context_kv: Any) -> ContextAdapter:
    """Return a logger carrying diagnostic context sent as additional fields."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_context_logger(name, **context_kv)


def open_connection(target: TargetConfig | None = None) -> GELFConnection:
    """Return an open connection to ``target``, or to the configured target."""

    if target is None:
        _ensure_configured()
    return GLOBAL_MANAGER.open_connection(target)


def shutdown() -> None:
    """Close the GELF handler installed by :func:`configure`."""

    global _CONFIGURED
    GLOBAL_MANAGER.shutdown()
    _CONFIGURED = False

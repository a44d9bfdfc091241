"""Runtime manager owning the GELF handler and its logger wiring."""

from __future__ import annotations

import logging
from typing import Dict, List

from ..config.schema import GelfsendConfig, TargetConfig
from ..handlers.gelf_udp import GELFUDPHandler, build_gelf_udp_handler
from .connection import GELFConnection
from .context import ContextAdapter, inject_context
from .levels import ensure_logging_level
from .validation import validate_configuration

logger = logging.getLogger(__name__)


class LogManager:
    """Central coordinator for gelfsend configuration."""

    def __init__(self) -> None:
        self._config: GelfsendConfig | None = None
        self._handler: GELFUDPHandler | None = None
        self._configured_loggers: List[str] = []
        self._previous_levels: Dict[str, int] = {}

    @property
    def config(self) -> GelfsendConfig | None:
        return self._config

    @property
    def handler(self) -> GELFUDPHandler | None:
        return self._handler

    # ------------------------------------------------------------------
    def configure(self, config: GelfsendConfig) -> None:
        """Apply the supplied configuration.

        The previous handler is detached and closed before the new one is
        installed on the root logger.
        """

        validate_configuration(config)
        self._teardown()

        handler = build_gelf_udp_handler(config.target, config.handler)
        self._config = config
        self._handler = handler

        root_logger = logging.getLogger()
        self._previous_levels["root"] = root_logger.level
        root_logger.setLevel(ensure_logging_level(config.logging.root_level))
        root_logger.addHandler(handler)
        self._configured_loggers = ["root"]

        for name, level in config.logging.loggers.items():
            named = logging.getLogger(name)
            self._previous_levels[name] = named.level
            named.setLevel(ensure_logging_level(level))
            self._configured_loggers.append(name)

        logger.debug(
            "GELF handler installed for %s:%s (compressed chunking: %s)",
            config.target.host,
            config.target.port,
            config.target.compressed_chunking,
        )

    def shutdown(self) -> None:
        """Detach and close the handler."""

        self._teardown()
        self._config = None

    # ------------------------------------------------------------------
    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_context_logger(self, name: str, **context_kv: object) -> ContextAdapter:
        if self._config and not self._config.context.enabled:
            base: Dict[str, object] = {}
        else:
            base = dict(context_kv)
            if self._config and self._config.context.allowed_keys:
                allowed = set(self._config.context.allowed_keys)
                base = {k: v for k, v in base.items() if k in allowed}
        return inject_context(self.get_logger(name), base_context=base)

    def open_connection(self, target: TargetConfig | None = None) -> GELFConnection:
        """Open a standalone connection to ``target`` or the configured target."""

        if target is None and self._config is not None:
            target = self._config.target
        return GELFConnection(target).open()

    # ------------------------------------------------------------------
    def _teardown(self) -> None:
        handler, self._handler = self._handler, None
        if handler is not None:
            logging.getLogger().removeHandler(handler)
            handler.close()

        for name in self._configured_loggers:
            previous = self._previous_levels.get(name, logging.NOTSET)
            target_logger = logging.getLogger() if name == "root" else logging.getLogger(name)
            target_logger.setLevel(previous)
        self._configured_loggers = []
        self._previous_levels = {}


GLOBAL_MANAGER = LogManager()

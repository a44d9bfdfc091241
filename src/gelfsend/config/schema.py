"""Configuration schema definition for gelfsend."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from ..core.chunker import DEFAULT_MAX_DATAGRAM_SIZE
from ..core.errors import ConfigurationError
from ..core.levels import SyslogLevel, ensure_level
from ..utils.hosts import local_hostname

DEFAULT_PORT = 12201
DEFAULT_FACILITY = "GELF"

DEFAULT_CONFIG: Dict[str, Any] = {
    "target": {
        "host": None,
        "port": DEFAULT_PORT,
        "origin_host": None,
        "facility": DEFAULT_FACILITY,
        "level": "ALERT",
        "compressed_chunking": True,
        "max_datagram_size": DEFAULT_MAX_DATAGRAM_SIZE,
        "additional_fields": {},
    },
    "handler": {
        "level": "INFO",
        "extract_stacktrace": True,
        "add_extended_information": False,
    },
    "logging": {
        "root_level": "INFO",
        "loggers": {},
    },
    "context": {
        "enabled": True,
        "allowed_keys": [],
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class TargetConfig:
    """Where and how messages are sent.

    ``host`` and ``origin_host`` default to the local host name.
    """

    host: str = field(default_factory=local_hostname)
    port: int = DEFAULT_PORT
    origin_host: str = field(default_factory=local_hostname)
    facility: str | None = DEFAULT_FACILITY
    level: SyslogLevel = SyslogLevel.ALERT
    compressed_chunking: bool = True
    max_datagram_size: int = DEFAULT_MAX_DATAGRAM_SIZE
    additional_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)


@dataclass(slots=True)
class HandlerOptions:
    level: str | int = "INFO"
    extract_stacktrace: bool = True
    add_extended_information: bool = False


@dataclass(slots=True)
class LoggingConfig:
    root_level: str | int = "INFO"
    loggers: Dict[str, str | int] = field(default_factory=dict)


@dataclass(slots=True)
class ContextConfig:
    enabled: bool = True
    allowed_keys: List[str] = field(default_factory=list)


@dataclass(slots=True)
class GelfsendConfig:
    target: TargetConfig
    handler: HandlerOptions
    logging: LoggingConfig
    context: ContextConfig
    raw: Dict[str, Any] = field(repr=False, default_factory=dict)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _to_target(data: Mapping[str, Any]) -> TargetConfig:
    host = data.get("host") or local_hostname()
    origin_host = data.get("origin_host") or local_hostname()
    fields_raw = data.get("additional_fields", {})
    fields = dict(fields_raw) if isinstance(fields_raw, Mapping) else {}
    facility = data.get("facility", DEFAULT_FACILITY)
    return TargetConfig(
        host=str(host),
        port=int(data.get("port", DEFAULT_PORT)),
        origin_host=str(origin_host),
        facility=str(facility) if facility is not None else None,
        level=ensure_level(data.get("level", SyslogLevel.ALERT)),
        compressed_chunking=_to_bool(data.get("compressed_chunking", True)),
        max_datagram_size=int(data.get("max_datagram_size", DEFAULT_MAX_DATAGRAM_SIZE)),
        additional_fields=fields,
    )


def _to_handler(data: Mapping[str, Any]) -> HandlerOptions:
    return HandlerOptions(
        level=data.get("level", "INFO"),
        extract_stacktrace=_to_bool(data.get("extract_stacktrace", True)),
        add_extended_information=_to_bool(data.get("add_extended_information", False)),
    )


def _to_logging(data: Mapping[str, Any]) -> LoggingConfig:
    loggers_raw = data.get("loggers", {})
    loggers: Dict[str, str | int] = {}
    if isinstance(loggers_raw, Mapping):
        for name, value in loggers_raw.items():
            loggers[str(name)] = value
    return LoggingConfig(root_level=data.get("root_level", "INFO"), loggers=loggers)


def _to_context(data: Mapping[str, Any]) -> ContextConfig:
    enabled = _to_bool(data.get("enabled", True))
    allowed_raw = data.get("allowed_keys", [])
    if isinstance(allowed_raw, Mapping):
        allowed = [str(item) for item in allowed_raw.keys()]
    elif isinstance(allowed_raw, Iterable) and not isinstance(allowed_raw, (str, bytes)):
        allowed = [str(item) for item in allowed_raw]
    else:
        allowed = []
    return ContextConfig(enabled=enabled, allowed_keys=allowed)


def build_config(data: Mapping[str, Any]) -> GelfsendConfig:
    try:
        target = _to_target(data.get("target", {}))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid target configuration: {exc}") from exc
    return GelfsendConfig(
        target=target,
        handler=_to_handler(data.get("handler", {})),
        logging=_to_logging(data.get("logging", {})),
        context=_to_context(data.get("context", {})),
        raw=deepcopy({k: v for k, v in data.items()}),
    )

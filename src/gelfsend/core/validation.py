"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import GelfsendConfig, TargetConfig
from .chunker import header_size
from .errors import ConfigurationError
from .message import coerce_field_value, is_valid_field_name

__all__ = ["ConfigurationError", "validate_configuration", "validate_target"]

_MAX_UDP_PAYLOAD = 65507


def validate_target(target: TargetConfig) -> None:
    """Ensure the target can be used to open a connection."""

    if not target.host or not target.host.strip():
        raise ConfigurationError("Target host must not be empty")
    if not 0 < target.port < 65536:
        raise ConfigurationError(f"Target port {target.port} is outside 1-65535")
    if not target.origin_host:
        raise ConfigurationError("Origin host must not be empty")

    minimum = header_size(target.compressed_chunking) + 1
    if not minimum <= target.max_datagram_size <= _MAX_UDP_PAYLOAD:
        raise ConfigurationError(
            f"max_datagram_size {target.max_datagram_size} must lie within {minimum}-{_MAX_UDP_PAYLOAD}"
        )

    for key, value in target.additional_fields.items():
        if not is_valid_field_name(str(key)):
            raise ConfigurationError(f"Additional field name '{key}' is reserved or invalid")
        if isinstance(value, (dict, list, tuple, set)):
            raise ConfigurationError(f"Additional field '{key}' must be a scalar value")
        if coerce_field_value(value) is None:
            raise ConfigurationError(f"Additional field '{key}' has no value")


def validate_configuration(config: GelfsendConfig) -> None:
    """Ensure configuration values are consistent."""

    validate_target(config.target)

    if any(not key for key in config.context.allowed_keys):
        raise ConfigurationError("Context allowed_keys must not contain empty names")

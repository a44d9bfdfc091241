from __future__ import annotations

import logging

import pytest

import gelfsend
from gelfsend import api
from gelfsend.core.errors import ConfigurationError
from gelfsend.core.manager import GLOBAL_MANAGER

from conftest import Receiver


def _overrides(receiver: Receiver, **handler: object) -> dict:
    return {
        "target": {"host": receiver.host, "port": receiver.port, "origin_host": "node1"},
        "handler": {"level": "INFO", **handler},
        "logging": {"root_level": "DEBUG", "loggers": {"tests.quiet": "ERROR"}},
    }


def test_configure_routes_root_logger(receiver: Receiver) -> None:
    api.configure(_overrides(receiver))
    logger = api.get_logger("tests.api")

    logger.debug("below handler level")
    logger.warning("careful")

    document = receiver.recv_json()
    assert document["short_message"] == "careful"
    assert document["level"] == 4
    receiver.assert_silent()

    api.get_logger("tests.quiet").warning("suppressed by logger level")
    receiver.assert_silent()


def test_context_logger_respects_allowed_keys(receiver: Receiver) -> None:
    overrides = _overrides(receiver, add_extended_information=True)
    overrides["context"] = {"allowed_keys": ["request_id"]}
    api.configure(overrides)

    logger = api.get_context_logger("tests.api", request_id="r-1", secret="hidden")
    logger.info("processed")

    document = receiver.recv_json()
    assert document["_request_id"] == "r-1"
    assert "_secret" not in document


def test_disabled_context_drops_values(receiver: Receiver) -> None:
    overrides = _overrides(receiver, add_extended_information=True)
    overrides["context"] = {"enabled": False}
    api.configure(overrides)

    api.get_context_logger("tests.api", request_id="r-1").info("processed")
    assert "_request_id" not in receiver.recv_json()


def test_reconfigure_replaces_handler(receiver: Receiver) -> None:
    api.configure(_overrides(receiver))
    first = GLOBAL_MANAGER.handler
    api.configure(_overrides(receiver))
    second = GLOBAL_MANAGER.handler

    assert first is not None and second is not None
    assert first is not second
    assert not first.connection.is_open
    root_handlers = logging.getLogger().handlers
    assert second in root_handlers and first not in root_handlers

    api.shutdown()
    assert not second.connection.is_open
    assert second not in logging.getLogger().handlers


def test_open_connection_uses_configured_target(receiver: Receiver) -> None:
    api.configure(_overrides(receiver))
    with api.open_connection() as connection:
        assert connection.send(connection.new_message("NOTICE", "direct"))
    document = receiver.recv_json()
    assert document["short_message"] == "direct"
    assert document["level"] == 5
    assert document["facility"] == "GELF"


def test_invalid_configuration_fails_fast(receiver: Receiver) -> None:
    with pytest.raises(ConfigurationError):
        api.configure({"target": {"host": receiver.host, "port": 0}})
    with pytest.raises(ConfigurationError):
        api.configure({"target": {"host": receiver.host, "additional_fields": {"host": "x"}}})
    with pytest.raises(ConfigurationError):
        api.configure({"target": {"host": receiver.host, "level": "LOUD"}})


def test_package_exports() -> None:
    assert gelfsend.__version__
    assert gelfsend.GELFConnection is not None
    assert issubclass(gelfsend.ConfigurationError, gelfsend.GELFError)
    assert issubclass(gelfsend.ConfigurationError, ValueError)

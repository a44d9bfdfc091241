"""Command line tool that sends a single GELF message."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List, Sequence

from .config.loader import load_configuration
from .config.schema import DEFAULT_FACILITY, DEFAULT_PORT
from .core.connection import GELFConnection
from .core.errors import ConfigurationError, GELFError
from .core.levels import SyslogLevel, ensure_level
from .handlers.console import ConsoleHandlerConfig, build_console_handler

__all__ = [
    "ERROR_PARSING_ARGS_EXIT_CODE",
    "ERROR_SENDING_EXIT_CODE",
    "SUCCESS_EXIT_CODE",
    "build_parser",
    "main",
]

SUCCESS_EXIT_CODE = 0
ERROR_PARSING_ARGS_EXIT_CODE = 1
ERROR_SENDING_EXIT_CODE = 2

logger = logging.getLogger(__name__)


def _level(value: str) -> SyslogLevel:
    try:
        return ensure_level(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid level: {value}") from exc


def _port(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port: {value}") from exc


def build_parser() -> argparse.ArgumentParser:
    levels = ",".join(level.name for level in SyslogLevel)
    parser = argparse.ArgumentParser(
        prog="gelfsend",
        description="Send a log message to a GELF collector over UDP.",
    )
    parser.add_argument("message", help="the log message to send")
    parser.add_argument(
        "-H", "--host", help="the host to send the message to. Defaults to the local host."
    )
    parser.add_argument(
        "-p", "--port", type=_port, help=f"the port on the server. Defaults to {DEFAULT_PORT}."
    )
    parser.add_argument(
        "-o",
        "--origin-host",
        help="the name of the host that generated the message. Defaults to the local host.",
    )
    parser.add_argument(
        "-f",
        "--facility",
        help=f"the facility against which the message is logged. Defaults to {DEFAULT_FACILITY}.",
    )
    parser.add_argument(
        "-l",
        "--level",
        type=_level,
        help=f"the syslog level, numeric (0-7) or textual ({levels}). Defaults to ALERT.",
    )
    parser.add_argument(
        "-D",
        "--additional-field",
        nargs=2,
        action="append",
        metavar=("KEY", "VALUE"),
        default=[],
        help="additional field added to the message. May be repeated.",
    )
    parser.add_argument(
        "-u",
        "--uncompressed-chunking",
        action="store_true",
        help="use the uncompressed chunking format used by Graylog2 prior to 0.9.6.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="print progress while sending the message."
    )
    return parser


def _target_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    target: Dict[str, Any] = {}
    if args.host:
        target["host"] = args.host
    if args.port is not None:
        target["port"] = args.port
    if args.origin_host:
        target["origin_host"] = args.origin_host
    if args.facility:
        target["facility"] = args.facility
    if args.level is not None:
        target["level"] = int(args.level)
    if args.uncompressed_chunking:
        target["compressed_chunking"] = False
    return {"target": target}


def _setup_output(verbose: bool) -> logging.Handler:
    handler = build_console_handler(
        ConsoleHandlerConfig(stream="stdout", level=logging.DEBUG if verbose else logging.WARNING)
    )
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return handler


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        # usage errors and --help both end here
        return ERROR_PARSING_ARGS_EXIT_CODE

    output = _setup_output(args.verbose)
    try:
        return _run(args)
    finally:
        logger.removeHandler(output)
        output.close()


def _run(args: argparse.Namespace) -> int:
    try:
        config = load_configuration(_target_overrides(args))
    except ConfigurationError as exc:
        logger.error("Error: %s", exc)
        return ERROR_PARSING_ARGS_EXIT_CODE

    target = config.target
    fields: List[List[str]] = args.additional_field
    additional = {key: value for key, value in fields}

    logger.debug("Server Host: %s", target.host)
    logger.debug("Server Port: %s", target.port)
    logger.debug("Origin Host: %s", target.origin_host)
    logger.debug("Compressed Chunking Format?: %s", target.compressed_chunking)
    logger.debug("Facility: %s", target.facility)
    logger.debug("Level: %s", target.level.name)
    logger.debug("Additional Data: %s", additional)
    logger.debug("Message: %s", args.message)

    connection: GELFConnection | None = None
    try:
        logger.debug("Attempting to transmit message")
        connection = GELFConnection(target).open()
        message = connection.new_message(
            target.level, args.message, full_message=args.message, fields=additional
        )
        if not connection.send(message):
            raise GELFError("message could not be transmitted")
        logger.debug("Log transmitted")
    except (GELFError, OSError) as exc:
        logger.error("Error: Transmitting message: %s", exc, exc_info=args.verbose)
        return ERROR_SENDING_EXIT_CODE
    finally:
        if connection is not None:
            connection.close()
    return SUCCESS_EXIT_CODE

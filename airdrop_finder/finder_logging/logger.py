"""
structlog setup for the eligibility engine.

Every record is one line on stderr. The snake_case event name passed as the
first positional argument lands in event_type; wallet addresses are logged
through short_address() so full addresses never reach the log stream.

LOG_LEVEL picks the threshold and LOG_FORMAT=console switches from JSON to
structlog's dev renderer. This module imports nothing from airdrop_finder, so
config and cache modules can log without import cycles.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# "json" or "console"
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

ADDRESS_LOG_PREFIX = 10


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """UTC ISO 8601 timestamp unless the caller supplied one."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Move the event name to event_type and mirror it into message when absent."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def configure_structlog() -> None:
    """Install the processor chain and a level-filtered logger writing to stderr."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def short_address(address: str | None) -> str:
    """Truncate an address for log fields: 0x12345678..."""
    address = address or ""
    if len(address) <= ADDRESS_LOG_PREFIX:
        return address
    return address[:ADDRESS_LOG_PREFIX] + "..."


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger with `logger` bound to the module name.

        logger = get_logger(__name__)
        logger.warning("chain_fetch_failed", chain_id=10, error="rpc 503")
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_address(address: str) -> structlog.BoundLogger:
    """Return a logger with the (truncated) wallet address bound to every call."""
    return get_logger("airdrop_finder").bind(address=short_address(address))

"""
Structured JSON logging: timestamp, level, event_type, wallet / object context.

structlog with ISO timestamps and consistent keys for aggregation. All modules
should use get_logger() and log a snake_case event name as the first argument,
passing address / object_id / error where relevant. A dashboard pass runs
inside pass_context(), so every event it emits (discovery, parsing, gateway
calls) carries the wallet address and session generation it was issued for.

Uses only Python stdlib logging and structlog; no backend_suisplit imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# JSON output for production (LOG_FORMAT=json); human-readable for local
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def _drop_none(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Omit keys logged as None (e.g. error=None on a successful pass)."""
    return {k: v for k, v in event_dict.items() if v is not None}


def configure_structlog() -> None:
    """Configure structlog once at import: JSON, timestamp, level, event_type."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _drop_none,
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
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def short_hex(value: str) -> str:
    """0x1234...abcd form of a long hex id; short values unchanged."""
    if len(value) <= 12:
        return value
    return f"{value[:6]}...{value[-4:]}"


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("wallet_connected", address=addr)
    Output (JSON): {"event_type": "wallet_connected", "address": "0x...", "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_address(logger: structlog.BoundLogger, address: str) -> structlog.BoundLogger:
    """Return logger with the (shortened) wallet address bound to all subsequent calls."""
    return logger.bind(address=short_hex(address))


@contextmanager
def pass_context(address: str, generation: int) -> Iterator[None]:
    """
    Bind the wallet address and session generation of a dashboard pass to
    every event logged in this context, including in tasks it spawns.
    """
    with structlog.contextvars.bound_contextvars(
        pass_address=short_hex(address) if address else "",
        pass_generation=generation,
    ):
        yield

"""
Structured logging for chain scans: one JSON object per event.

Every event carries event_type, level, timestamp and the emitting logger;
per-chain work binds chain once via bind_chain(). Transaction hashes are
shortened in output so progress logs stay readable on block-heavy chains.

Depends only on structlog and the stdlib so any walletscan module can import it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# keys holding 0x-prefixed 32-byte hashes
HASH_KEYS = ("tx_hash", "block_hash")
HASH_PREFIX_LEN = 18


def _shorten_hashes(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in HASH_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > HASH_PREFIX_LEN:
            event_dict[key] = value[:HASH_PREFIX_LEN] + "..."
    return event_dict


def _rename_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's 'event' key is emitted as event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _renderer(fmt: str) -> Any:
    if fmt == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_structlog(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """(Re)configure structlog. Unknown level names fall back to INFO."""
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.format_exc_info,
            _shorten_hashes,
            _rename_event,
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("records_query_done", chain="bnb", record_count=120)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_chain(chain: str | None, name: str = "walletscan") -> structlog.BoundLogger:
    """Logger for name with chain bound to every event (chain=None when unscoped)."""
    return get_logger(name).bind(chain=chain)

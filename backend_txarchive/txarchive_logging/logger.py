"""
Structured request logging for TxArchive.

Nothing is configured at import time: the app factory and main() call
configure_logging() with the level and format from Settings, so values set
in .env apply. Loggers returned by get_logger() are lazy and pick up the
configuration active when they emit, including loggers created at module
import before configure_logging() ran.

No backend_txarchive imports here to avoid circular imports.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LOG_FORMATS = ("json", "console")


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Rename structlog's event key to event_type."""
    event_dict.setdefault("event_type", event_dict.pop("event", None))
    return event_dict


def _renderers(log_format: str) -> list[Any]:
    # ConsoleRenderer reads the event key itself
    if log_format == "console":
        return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]
    return [_event_type, structlog.processors.JSONRenderer()]


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """
    (Re)configure structlog: level filter, ISO UTC timestamp, event_type key, renderer.

    Lines go to whatever sys.stdout is when they are emitted.
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format!r}")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.format_exc_info,
            *_renderers(log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Return a lazy structured logger that tags every line with logger=name.

        logger = get_logger(__name__)
        logger.info("snapshot_written", wallet_id=short_wallet(addr), record_count=3)
    """
    # structlog.get_logger(name, logger=name) collides with wrap_logger's own
    # `logger` parameter, so build the same lazy proxy directly.
    return structlog._config.BoundLoggerLazyProxy(
        None, initial_values={"logger": name}, logger_factory_args=(name,)
    )


def short_wallet(wallet_id: str) -> str:
    """Truncate a wallet address for log output."""
    return wallet_id[:8] + "..." if len(wallet_id) > 8 else wallet_id

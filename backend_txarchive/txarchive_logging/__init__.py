"""
Structured logging for Backend TxArchive.

JSON logs with timestamp, level, event_type and request context.
Use get_logger() in every module; configure_logging() runs from the app factory.
"""

from backend_txarchive.txarchive_logging.logger import configure_logging, get_logger, short_wallet

__all__ = ["configure_logging", "get_logger", "short_wallet"]

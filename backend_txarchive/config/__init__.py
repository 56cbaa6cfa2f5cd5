"""
Configuration management for Backend TxArchive.

Loads and validates settings from environment variables and an optional
.env file.
"""

from backend_txarchive.config.settings import Settings, get_settings, load_settings  # noqa: F401

__all__ = ["Settings", "get_settings", "load_settings"]

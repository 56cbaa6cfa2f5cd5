"""
Application settings.

Single source of truth for the RPC endpoint, bootstrap retry policy, fetch
limits, output directory, rate limit window and HTTP bind address. Values
come from environment variables (and .env) with defaults matching the
public mainnet setup.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from backend_txarchive.config.env import (
    MAINNET_RPC_URL,
    env_float,
    env_int,
    env_str,
    load_txarchive_env,
)
from backend_txarchive.core.exceptions import ConfigError

_COMMITMENTS = ("processed", "confirmed", "finalized")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("json", "console")


@dataclass(frozen=True)
class Settings:
    """Typed service configuration. Build directly in tests; use get_settings() in the app."""

    rpc_url: str = MAINNET_RPC_URL
    commitment: str = "confirmed"
    rpc_timeout_sec: float = 30.0
    connect_max_attempts: int = 3
    connect_retry_delay_sec: float = 2.0
    signature_limit: int = 10
    max_concurrency: int = 10
    responses_dir: Path = Path("responses")
    rate_limit_max: int = 100
    rate_limit_window_sec: float = 15 * 60
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    log_level: str = "INFO"
    log_format: str = "json"


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Read settings from the environment after loading env_file (default: .env at project root).

    Raises ConfigError on invalid values.
    """
    load_txarchive_env(env_file)
    commitment = env_str("SOLANA_COMMITMENT", "confirmed").lower()
    if commitment not in _COMMITMENTS:
        raise ConfigError(f"SOLANA_COMMITMENT must be one of {_COMMITMENTS}, got {commitment!r}")
    log_level = env_str("LOG_LEVEL", "INFO").upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {_LOG_LEVELS}, got {log_level!r}")
    log_format = env_str("LOG_FORMAT", "json").lower()
    if log_format not in _LOG_FORMATS:
        raise ConfigError(f"LOG_FORMAT must be one of {_LOG_FORMATS}, got {log_format!r}")
    return Settings(
        rpc_url=env_str("SOLANA_RPC_URL", MAINNET_RPC_URL),
        commitment=commitment,
        rpc_timeout_sec=env_float("RPC_TIMEOUT_SEC", 30.0, minimum=0.1),
        connect_max_attempts=env_int("CONNECT_MAX_ATTEMPTS", 3, minimum=1),
        connect_retry_delay_sec=env_float("CONNECT_RETRY_DELAY_SEC", 2.0, minimum=0.0),
        signature_limit=env_int("SIGNATURE_LIMIT", 10, minimum=1, maximum=1000),
        max_concurrency=env_int("FETCH_MAX_CONCURRENCY", 10, minimum=1),
        responses_dir=Path(env_str("RESPONSES_DIR", "responses")),
        rate_limit_max=env_int("RATE_LIMIT_MAX", 100, minimum=1),
        rate_limit_window_sec=env_float("RATE_LIMIT_WINDOW_SEC", 15 * 60, minimum=1.0),
        api_host=env_str("API_HOST", "0.0.0.0"),
        api_port=env_int("API_PORT", 3000, minimum=1, maximum=65535),
        log_level=log_level,
        log_format=log_format,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once from the environment."""
    return load_settings()

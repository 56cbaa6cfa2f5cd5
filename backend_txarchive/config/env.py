"""
Environment variable loading for TxArchive.

- Loads .env from the project root when present.
- Typed readers that raise ConfigError instead of failing deep inside the app.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from backend_txarchive.core.exceptions import ConfigError

# Project root: config is backend_txarchive/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"


def load_txarchive_env(env_file: str | Path | None = None) -> None:
    """Load env_file (default: .env at project root). Existing env vars win. Safe to call multiple times."""
    load_dotenv(env_file or _ENV_PATH, override=False)


def env_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def env_int(name: str, default: int, *, minimum: int | None = None, maximum: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ConfigError(f"{name} must be <= {maximum}, got {value}")
    return value


def env_float(name: str, default: float, *, minimum: float | None = None) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
    if minimum is not None and value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


def mask_rpc_url(url: str) -> str:
    """Hide API keys embedded in RPC URLs (e.g. ?api-key=...) for logging."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url

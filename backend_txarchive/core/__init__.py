"""
Core utilities — exceptions shared by the gateway, fetcher and API server.
"""

from backend_txarchive.core.exceptions import (
    ConfigError,
    ConnectivityError,
    InvalidAddressError,
    PersistenceError,
    ResolutionError,
    RpcError,
    TxArchiveError,
)

__all__ = [
    "ConfigError",
    "ConnectivityError",
    "InvalidAddressError",
    "PersistenceError",
    "ResolutionError",
    "RpcError",
    "TxArchiveError",
]

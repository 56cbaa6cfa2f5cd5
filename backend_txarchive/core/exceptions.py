"""
Application-level exceptions.

Every failure the API turns into a generic 500 has its own type here so the
server log can tell them apart. ResolutionError never leaves the fetcher: it is
recorded on a failed Resolution instead of being raised.
"""

from __future__ import annotations

from typing import Any


class TxArchiveError(Exception):
    """Base class for all Backend TxArchive errors."""


class ConfigError(TxArchiveError):
    """An environment setting could not be parsed or is out of range."""


class ConnectivityError(TxArchiveError):
    """RPC bootstrap failed on every attempt."""

    def __init__(self, url: str, attempts: int) -> None:
        super().__init__(f"Could not connect to Solana RPC {url} after {attempts} attempts")
        self.url = url
        self.attempts = attempts


class InvalidAddressError(TxArchiveError):
    """Path parameter is not a valid Solana public key."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid Solana wallet address: {address!r}")
        self.address = address


class RpcError(TxArchiveError):
    """JSON-RPC response carried an error object."""

    def __init__(self, method: str, code: Any, rpc_message: str) -> None:
        super().__init__(f"Solana RPC error in {method}: {rpc_message} (code={code})")
        self.method = method
        self.code = code
        self.rpc_message = rpc_message


class ResolutionError(TxArchiveError):
    """A single signature could not be resolved to a transaction."""

    def __init__(self, signature: str, reason: str) -> None:
        super().__init__(f"Failed to resolve transaction {signature}: {reason}")
        self.signature = signature
        self.reason = reason


class PersistenceError(TxArchiveError):
    """Snapshot file could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
        self.reason = reason

"""
Backend TxArchive — Solana wallet transaction snapshot service.

Fetches the most recent transactions of a wallet from a Solana RPC node,
stores each snapshot as a JSON file and serves it over HTTP.
"""

__version__ = "0.1.0"

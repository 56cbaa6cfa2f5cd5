"""
Transaction fetcher package — resolves a wallet's recent transactions and
stores each result as a JSON snapshot file.
"""

from backend_txarchive.fetcher.service import FetchResult, TransactionFetcher, parse_address
from backend_txarchive.fetcher.storage import ResponseStore

__all__ = ["FetchResult", "ResponseStore", "TransactionFetcher", "parse_address"]

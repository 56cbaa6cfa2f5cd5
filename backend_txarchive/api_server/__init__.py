"""
API server package — HTTP interface.

Serves wallet transaction snapshots, applies per-client rate limiting and
delegates to the fetcher for data.
"""

# Record store access: MongoDB queries for captured RPC traffic per chain.

from walletscan.ingestion.store import build_query, connect, fetch_records

__all__ = ["build_query", "connect", "fetch_records"]

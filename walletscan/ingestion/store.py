"""
MongoDB query layer for captured RPC records.

Records are filtered by chain (the "target" field) and a timestamp range
(unix seconds, inclusive). Results are returned in natural collection order.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from walletscan.core.exceptions import RecordStoreError
from walletscan.walletscan_logging import get_logger

logger = get_logger(__name__)

SERVER_SELECTION_TIMEOUT_MS = 10_000


def build_query(chain: str, start_ts: int, end_ts: int | None = None) -> dict[str, Any]:
    """Filter for one chain's records with start_ts <= timestamp (<= end_ts)."""
    ts_filter: dict[str, int] = {"$gte": int(start_ts)}
    if end_ts is not None:
        ts_filter["$lte"] = int(end_ts)
    return {"timestamp": ts_filter, "target": chain}


def connect(uri: str, db_name: str) -> Database:
    """Open a MongoDB client and return the named database; ping to fail fast."""
    try:
        client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS)
        client.admin.command("ping")
    except PyMongoError as e:
        logger.error("mongodb_connect_failed", error=str(e))
        raise RecordStoreError(f"Failed to connect to MongoDB: {e}") from e
    logger.info("mongodb_connected", db_name=db_name)
    return client[db_name]


def _iso(ts: int | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def fetch_records(
    collection: Collection,
    chain: str,
    start_ts: int,
    end_ts: int | None = None,
) -> list[dict[str, Any]]:
    """Return all records for chain in [start_ts, end_ts]; RecordStoreError on query failure."""
    query = build_query(chain, start_ts, end_ts)
    logger.info(
        "records_query_started",
        chain=chain,
        start_timestamp=start_ts,
        start=_iso(start_ts),
        end_timestamp=end_ts,
        end=_iso(end_ts),
    )
    try:
        records = list(collection.find(query))
    except PyMongoError as e:
        logger.error("records_query_failed", chain=chain, error=str(e))
        raise RecordStoreError(f"Error querying records for {chain}: {e}") from e
    logger.info("records_query_done", chain=chain, record_count=len(records))
    return records

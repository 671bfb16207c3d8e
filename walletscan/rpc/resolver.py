"""
Transaction resolver — eth_getTransactionByHash over HTTP JSON-RPC.

One resolver per chain: transaction hashes are only meaningful against
that chain's endpoint. Every call is bounded by a timeout; any failure
(transport, HTTP status, timeout, RPC error, unknown hash) surfaces as
ResolutionError. No retries.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Callable

import httpx

from walletscan.core.exceptions import ResolutionError
from walletscan.walletscan_logging import get_logger

logger = get_logger(__name__)

_request_ids = itertools.count(1)


@dataclass(frozen=True)
class ResolvedTransaction:
    """Subset of an eth_getTransactionByHash result needed for sender extraction."""

    hash: str
    from_address: str | None
    to_address: str | None = None
    block_number: int | None = None

    @classmethod
    def from_rpc_result(cls, tx_hash: str, result: dict[str, Any]) -> "ResolvedTransaction":
        """Build from a JSON-RPC transaction object (hex quantities, camelCase keys)."""
        block = result.get("blockNumber")
        block_number = None
        if isinstance(block, str) and block:
            try:
                block_number = int(block, 16)
            except ValueError:
                block_number = None
        sender = result.get("from")
        to = result.get("to")
        return cls(
            hash=result.get("hash") or tx_hash,
            from_address=sender if isinstance(sender, str) and sender else None,
            to_address=to if isinstance(to, str) and to else None,
            block_number=block_number,
        )


# Resolver capability: resolve(tx_hash) -> ResolvedTransaction, raises ResolutionError.
Resolver = Callable[[str], ResolvedTransaction]


def _build_rpc_body(tx_hash: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": "eth_getTransactionByHash",
        "params": [tx_hash],
    }


class TransactionResolver:
    """
    Resolve transaction hashes against one chain's RPC endpoint.

    Callable, so an instance can be passed wherever a Resolver is expected.
    Use as a context manager (or call close()) to release the HTTP client.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not (rpc_url or "").strip():
            raise ValueError("rpc_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        self._rpc_url = rpc_url.strip()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_sec))

    def __call__(self, tx_hash: str) -> ResolvedTransaction:
        return self.resolve(tx_hash)

    def __enter__(self) -> "TransactionResolver":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def resolve(self, tx_hash: str) -> ResolvedTransaction:
        """Fetch the transaction for tx_hash; raise ResolutionError on any failure."""
        if not isinstance(tx_hash, str) or not tx_hash.strip():
            raise ResolutionError(str(tx_hash), "empty or non-string hash")
        tx_hash = tx_hash.strip()
        try:
            resp = self._client.post(self._rpc_url, json=_build_rpc_body(tx_hash))
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as e:
            raise ResolutionError(tx_hash, f"timeout: {e}") from e
        except httpx.HTTPError as e:
            raise ResolutionError(tx_hash, f"transport: {e}") from e
        except ValueError as e:
            raise ResolutionError(tx_hash, f"invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise ResolutionError(tx_hash, "unexpected response shape")
        if "error" in data:
            err = data["error"]
            message = err.get("message", err) if isinstance(err, dict) else err
            raise ResolutionError(tx_hash, f"rpc error: {message}")
        result = data.get("result")
        if result is None:
            raise ResolutionError(tx_hash, "transaction not found")
        if not isinstance(result, dict):
            raise ResolutionError(tx_hash, "result is not a transaction object")
        return ResolvedTransaction.from_rpc_result(tx_hash, result)

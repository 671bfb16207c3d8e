"""
Captured RPC records — stored documents decoded into a typed, immutable view.

Stored documents nest the JSON-RPC bodies under request.body / response.body;
a flat request.params / response.result layout is accepted as well. Decoding
never raises: absent or wrongly-typed fields become None or an empty tuple.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

# JSON-RPC method names
ETH_GET_BLOCK_BY_NUMBER = "eth_getBlockByNumber"
ETH_GET_BLOCK_BY_HASH = "eth_getBlockByHash"
ETH_SEND_RAW_TRANSACTION = "eth_sendRawTransaction"
ETH_GET_TRANSACTION_BY_HASH = "eth_getTransactionByHash"
ETH_GET_TRANSACTION_RECEIPT = "eth_getTransactionReceipt"
ETH_CALL = "eth_call"
ETH_ESTIMATE_GAS = "eth_estimateGas"

BLOCK_METHODS = frozenset({ETH_GET_BLOCK_BY_NUMBER, ETH_GET_BLOCK_BY_HASH})
CALL_METHODS = frozenset({ETH_CALL, ETH_ESTIMATE_GAS})

_MISSING = object()


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, _MISSING)
    return _MISSING


def _body_field(section: Any, key: str) -> Any:
    """Read section.body.<key>, falling back to section.<key>; _MISSING if neither exists."""
    value = _get(_get(section, "body"), key)
    if value is _MISSING:
        value = _get(section, key)
    return value


@dataclass(frozen=True)
class RpcRecord:
    """
    One captured JSON-RPC request/response pair.

    method: RPC method name, None if absent or not a string.
    params: request arguments, empty tuple if absent or not a list.
    result: response payload (hash string, block/transaction object, ...), None if absent.
    doc_id / chain / timestamp: store metadata, used for logging only.
    """

    method: str | None
    params: tuple[Any, ...] = ()
    result: Any = None
    doc_id: str | None = None
    chain: str | None = None
    timestamp: int | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any] | Any) -> "RpcRecord":
        if isinstance(doc, RpcRecord):
            return doc
        if not isinstance(doc, Mapping):
            return cls(method=None)

        method = doc.get("method")
        params = _body_field(doc.get("request"), "params")
        result = _body_field(doc.get("response"), "result")

        doc_id = doc.get("_id")
        timestamp = doc.get("timestamp")
        chain = doc.get("target")
        return cls(
            method=method if isinstance(method, str) else None,
            params=tuple(params) if isinstance(params, list) else (),
            result=None if result is _MISSING else result,
            doc_id=str(doc_id) if doc_id is not None else None,
            chain=chain if isinstance(chain, str) else None,
            timestamp=timestamp if isinstance(timestamp, int) and not isinstance(timestamp, bool) else None,
        )

    def result_field(self, key: str) -> Any:
        """response.result.<key> when the result is an object, else None."""
        if isinstance(self.result, Mapping):
            return self.result.get(key)
        return None

    def param(self, index: int) -> Any:
        """request.params[index], None if out of range."""
        if 0 <= index < len(self.params):
            return self.params[index]
        return None

"""
Sender address extraction from captured RPC records.

A record is checked against independent rules; each rule returns the raw
sender values it found and extract_addresses() normalizes them. Rules keyed
on the response (block, raw send, tx lookup, receipt) are chosen by method,
at most one per record. The request-parameter rules run on every record and
add to whatever the method rule found; a record can report the same address
more than once and every report counts.

Nothing here raises: a failed resolution drops that one finding, a failing
rule drops that rule's findings, and a malformed record yields [].
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from walletscan.core.exceptions import ResolutionError
from walletscan.extraction.records import (
    CALL_METHODS,
    ETH_GET_BLOCK_BY_HASH,
    ETH_GET_BLOCK_BY_NUMBER,
    ETH_GET_TRANSACTION_BY_HASH,
    ETH_GET_TRANSACTION_RECEIPT,
    ETH_SEND_RAW_TRANSACTION,
    RpcRecord,
)
from walletscan.rpc.resolver import Resolver
from walletscan.walletscan_logging import get_logger

logger = get_logger(__name__)


def normalize_address(value: Any) -> str | None:
    """
    Lower-case a raw address; None for non-strings and empty strings.

    Surrounding whitespace is stripped as well, so padded values captured in
    request params fold onto the same address as their unpadded form.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    return value.lower()


def _sender_of(tx: Any) -> Any:
    """'from' of a resolved transaction (ResolvedTransaction or plain dict)."""
    if tx is None:
        return None
    if isinstance(tx, Mapping):
        return tx.get("from")
    return getattr(tx, "from_address", None)


def _resolve_sender(resolver: Resolver, tx_hash: Any) -> Any:
    """Resolve tx_hash and return its sender, or None if resolution fails."""
    if not tx_hash:
        return None
    try:
        tx = resolver(tx_hash)
    except ResolutionError as e:
        logger.debug("resolve_failed", tx_hash=str(tx_hash), reason=e.reason)
        return None
    except Exception as e:
        logger.warning("resolve_unexpected_error", tx_hash=str(tx_hash), error=str(e))
        return None
    return _sender_of(tx)


# --- method rules (at most one applies per record) ---


def _block_senders(record: RpcRecord, resolver: Resolver) -> list[Any]:
    txs = record.result_field("transactions")
    if not isinstance(txs, list) or not txs:
        return []
    if isinstance(txs[0], Mapping):
        return [tx.get("from") for tx in txs if isinstance(tx, Mapping) and tx.get("from")]
    return [_resolve_sender(resolver, tx_hash) for tx_hash in txs]


def _raw_submission_sender(record: RpcRecord, resolver: Resolver) -> list[Any]:
    if not record.result:
        return []
    return [_resolve_sender(resolver, record.result)]


def _transaction_lookup_sender(record: RpcRecord, resolver: Resolver) -> list[Any]:
    sender = record.result_field("from")
    return [sender] if sender else []


def _receipt_sender(record: RpcRecord, resolver: Resolver) -> list[Any]:
    tx_hash = record.param(0)
    if not tx_hash:
        return []
    return [_resolve_sender(resolver, tx_hash)]


MethodRule = Callable[[RpcRecord, Resolver], list[Any]]

METHOD_RULES: dict[str, MethodRule] = {
    ETH_GET_BLOCK_BY_NUMBER: _block_senders,
    ETH_GET_BLOCK_BY_HASH: _block_senders,
    ETH_SEND_RAW_TRANSACTION: _raw_submission_sender,
    ETH_GET_TRANSACTION_BY_HASH: _transaction_lookup_sender,
    ETH_GET_TRANSACTION_RECEIPT: _receipt_sender,
}


# --- request parameter rules (always evaluated) ---


def _param_from_fields(record: RpcRecord, resolver: Resolver) -> list[Any]:
    return [p.get("from") for p in record.params if isinstance(p, Mapping) and p.get("from")]


def _call_param_sender(record: RpcRecord, resolver: Resolver) -> list[Any]:
    if record.method not in CALL_METHODS:
        return []
    first = record.param(0)
    if isinstance(first, Mapping) and first.get("from"):
        return [first["from"]]
    return []


PARAM_RULES: tuple[MethodRule, ...] = (_param_from_fields, _call_param_sender)


def _rules_for(record: RpcRecord) -> Iterable[MethodRule]:
    method_rule = METHOD_RULES.get(record.method) if record.method else None
    if method_rule is not None:
        yield method_rule
    yield from PARAM_RULES


def extract_addresses(record: RpcRecord | Mapping[str, Any], resolver: Resolver) -> list[str]:
    """
    Return the normalized sender addresses found in one record, duplicates kept.

    record may be an RpcRecord or a raw stored document. resolver is only called
    for records that reference transactions by hash.
    """
    try:
        rec = RpcRecord.from_document(record)
    except Exception as e:
        logger.debug("extract_decode_failed", error=str(e))
        return []

    findings: list[str] = []
    for rule in _rules_for(rec):
        try:
            raw = rule(rec, resolver)
        except Exception as e:
            logger.warning(
                "extract_rule_failed",
                rule=rule.__name__,
                method=rec.method,
                record_id=rec.doc_id,
                chain=rec.chain,
                record_timestamp=rec.timestamp,
                error=str(e),
            )
            continue
        for value in raw:
            address = normalize_address(value)
            if address is not None:
                findings.append(address)
    return findings

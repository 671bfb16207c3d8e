"""
Per-chain processing and the multi-chain driver.

process_records() feeds records through extract_addresses() and folds the
findings into aggregators in input order. process_chain() wires one chain's
query and resolver together and contains every chain-level failure, so one
bad chain never stops the others. run_all_chains() threads one shared
counts aggregator through every chain and merges the per-chain unique sets.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from pymongo.collection import Collection

from walletscan.config.env import Settings
from walletscan.extraction.aggregator import AddressAggregator
from walletscan.extraction.extractor import extract_addresses
from walletscan.ingestion.store import fetch_records
from walletscan.rpc.resolver import Resolver, TransactionResolver
from walletscan.walletscan_logging import bind_chain, get_logger

logger = get_logger(__name__)

PROGRESS_LOG_EVERY = 100

ResolverFactory = Callable[[str, float], Resolver]


def default_resolver_factory(rpc_url: str, timeout_sec: float) -> TransactionResolver:
    return TransactionResolver(rpc_url, timeout_sec=timeout_sec)


@dataclass
class ChainResult:
    """Outcome of one chain: its unique addresses and how many records were scanned."""

    chain: str
    addresses: list[str] = field(default_factory=list)
    record_count: int = 0


@dataclass
class RunResult:
    """Outcome of a whole run across chains."""

    unique_addresses: list[str]
    counts: dict[str, int]
    records_by_chain: dict[str, int]
    total_records: int
    chains: tuple[str, ...] = ()


def _extract_one(record: Mapping[str, Any], resolver: Resolver, log: Any) -> list[str]:
    try:
        return extract_addresses(record, resolver)
    except Exception as e:
        record_id = record.get("_id") if isinstance(record, Mapping) else None
        log.warning("record_processing_failed", record_id=str(record_id), error=str(e))
        return []


def _findings_stream(
    records: Iterable[Mapping[str, Any]],
    resolver: Resolver,
    log: Any,
    workers: int,
) -> Iterator[list[str]]:
    """Yield each record's findings in input order, extracting on a thread pool when workers > 1."""
    if workers <= 1:
        for record in records:
            yield _extract_one(record, resolver, log)
        return
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="walletscan-extract") as pool:
        yield from pool.map(lambda r: _extract_one(r, resolver, log), records)


def process_records(
    records: Sequence[Mapping[str, Any]],
    resolver: Resolver,
    aggregator: AddressAggregator,
    *,
    run_totals: AddressAggregator | None = None,
    chain: str | None = None,
    workers: int = 1,
) -> int:
    """
    Extract every record and add its findings to aggregator (and run_totals, if given).

    Findings are folded on the calling thread in input order, so counts do not
    depend on workers. Returns the number of records processed.
    """
    log = bind_chain(chain, __name__)
    total = len(records)
    log.info("records_processing_started", record_count=total, workers=workers)
    processed = 0
    for findings in _findings_stream(records, resolver, log, workers):
        processed += 1
        aggregator.add_findings(findings)
        if run_totals is not None:
            run_totals.add_findings(findings)
        if processed % PROGRESS_LOG_EVERY == 0:
            log.info(
                "records_processing_progress",
                processed=processed,
                record_count=total,
                unique_addresses=aggregator.unique_count,
            )
    log.info(
        "records_processing_done",
        processed=processed,
        unique_addresses=aggregator.unique_count,
    )
    return processed


def _close_resolver(resolver: Any) -> None:
    close = getattr(resolver, "close", None)
    if callable(close):
        close()


def process_chain(
    collection: Collection,
    chain: str,
    settings: Settings,
    run_totals: AddressAggregator,
    *,
    resolver_factory: ResolverFactory | None = None,
) -> ChainResult:
    """
    Query, extract, and aggregate one chain.

    Failures (no RPC URL, query error, ...) are logged and produce an empty
    ChainResult. Findings already added to run_totals before a failure are kept.
    """
    log = bind_chain(chain, __name__)
    log.info("chain_processing_started")
    resolver = None
    try:
        rpc_url = settings.rpc_url_for(chain)
        if not rpc_url:
            raise ValueError(f"No RPC URL configured for chain: {chain}")
        factory = resolver_factory or default_resolver_factory
        resolver = factory(rpc_url, settings.rpc_timeout_sec)
        records = fetch_records(collection, chain, settings.start_timestamp or 0, settings.end_timestamp)
        if not records:
            log.info("chain_no_records")
            return ChainResult(chain=chain)

        chain_aggregator = AddressAggregator()
        process_records(
            records,
            resolver,
            chain_aggregator,
            run_totals=run_totals,
            chain=chain,
            workers=settings.workers,
        )
        log.info(
            "chain_processing_done",
            record_count=len(records),
            unique_addresses=chain_aggregator.unique_count,
        )
        return ChainResult(chain=chain, addresses=chain_aggregator.addresses, record_count=len(records))
    except Exception as e:
        log.exception("chain_processing_failed", error=str(e))
        return ChainResult(chain=chain)
    finally:
        if resolver is not None:
            _close_resolver(resolver)


def run_all_chains(
    collection: Collection,
    settings: Settings,
    *,
    resolver_factory: ResolverFactory | None = None,
) -> RunResult:
    """Process settings.chains in order and combine their results."""
    logger.info("run_started", chains=list(settings.chains))
    run_totals = AddressAggregator()
    merged = AddressAggregator()
    records_by_chain: dict[str, int] = {}
    for chain in settings.chains:
        result = process_chain(collection, chain, settings, run_totals, resolver_factory=resolver_factory)
        merged.merge(result.addresses)
        records_by_chain[chain] = result.record_count

    _, counts = run_totals.snapshot()
    total_records = sum(records_by_chain.values())
    logger.info(
        "run_done",
        unique_addresses=merged.unique_count,
        total_records=total_records,
        records_by_chain=records_by_chain,
    )
    return RunResult(
        unique_addresses=merged.addresses,
        counts=counts,
        records_by_chain=records_by_chain,
        total_records=total_records,
        chains=tuple(settings.chains),
    )

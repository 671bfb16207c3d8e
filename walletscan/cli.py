"""CLI for WalletScan: extract sender wallets from captured RPC traffic and write CSV reports."""

from __future__ import annotations

import argparse
from datetime import datetime

from pymongo.errors import PyMongoError

from walletscan.config.env import ALL_CHAINS, Settings, load_settings, validate_settings
from walletscan.core.exceptions import ConfigError, WalletScanError
from walletscan.ingestion.store import connect
from walletscan.pipeline import RunResult, run_all_chains
from walletscan.reporting.csv_reports import (
    derived_report_paths,
    write_addresses_csv,
    write_counts_csv,
    write_stats_csv,
)
from walletscan.walletscan_logging import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walletscan",
        description="Extract unique sender wallets from captured RPC records per chain.",
    )
    parser.add_argument(
        "--chain",
        action="append",
        choices=ALL_CHAINS,
        help="Chain to process (repeatable). Default: CHAINS env or all chains",
    )
    parser.add_argument("--start", type=int, help="Minimum record timestamp (unix seconds); overrides START_TIMESTAMP")
    parser.add_argument("--end", type=int, help="Maximum record timestamp (unix seconds); overrides END_TIMESTAMP")
    parser.add_argument("--output", help="Address CSV path; overrides OUTPUT_FILE")
    parser.add_argument("--workers", type=int, help="Extraction threads per chain; overrides EXTRACT_WORKERS")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Environment settings with CLI overrides applied, then validated."""
    settings = load_settings(validate=False).with_overrides(
        chains=tuple(args.chain) if args.chain else None,
        start_timestamp=args.start,
        end_timestamp=args.end,
        output_file=args.output,
        workers=max(1, args.workers) if args.workers is not None else None,
    )
    validate_settings(settings)
    return settings


def write_reports(settings: Settings, result: RunResult) -> None:
    addresses_path, stats_path, counts_path = derived_report_paths(settings.output_file)
    write_addresses_csv(addresses_path, result.unique_addresses)
    period_start = datetime.fromtimestamp(settings.start_timestamp or 0)
    period_end = datetime.fromtimestamp(settings.end_timestamp) if settings.end_timestamp else datetime.now()
    write_stats_csv(
        stats_path,
        unique_count=len(result.unique_addresses),
        total_records=result.total_records,
        records_by_chain=result.records_by_chain,
        period_start=period_start,
        period_end=period_end,
        chains=settings.chains,
    )
    write_counts_csv(counts_path, result.counts)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        logger.error("config_error", error=str(e), missing=e.missing)
        return 2

    try:
        db = connect(settings.mongodb_uri, settings.mongodb_db_name)
        result = run_all_chains(db[settings.mongodb_collection], settings)
        write_reports(settings, result)
    except (WalletScanError, PyMongoError, OSError) as e:
        logger.error("fatal_error", error=str(e))
        return 1

    for chain in settings.chains:
        logger.info("run_chain_breakdown", chain=chain, record_count=result.records_by_chain.get(chain, 0))
    logger.info(
        "run_completed",
        unique_addresses=len(result.unique_addresses),
        total_records=result.total_records,
        output=settings.output_file,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

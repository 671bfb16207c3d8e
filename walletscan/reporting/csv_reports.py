"""
CSV report writers.

Three files per run, named from the configured output path:
- <output>: ADDRESS (one unique address per row)
- <base>_stats.csv: METRIC,VALUE (time period, totals, per-chain record counts)
- <base>_counts.csv: ADDRESS,TRANSACTION_COUNT
"""

from __future__ import annotations

import csv
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping

from walletscan.walletscan_logging import get_logger

logger = get_logger(__name__)

_CSV_SUFFIX_RE = re.compile(r"\.csv$")


def derived_report_paths(output: str | Path) -> tuple[Path, Path, Path]:
    """Return (addresses, stats, counts) paths for an output file name."""
    output = str(output)
    base = _CSV_SUFFIX_RE.sub("", output)
    return Path(output), Path(f"{base}_stats.csv"), Path(f"{base}_counts.csv")


def _write_rows(path: Path, fieldnames: list[str], rows: Iterable[dict]) -> int:
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
            count += 1
    return count


def write_addresses_csv(path: str | Path, addresses: Iterable[str]) -> Path:
    path = Path(path)
    n = _write_rows(path, ["ADDRESS"], ({"ADDRESS": a} for a in addresses))
    logger.info("report_addresses_written", path=str(path), address_count=n)
    return path


def write_counts_csv(path: str | Path, counts: Mapping[str, int]) -> Path:
    path = Path(path)
    rows = ({"ADDRESS": a, "TRANSACTION_COUNT": c} for a, c in counts.items())
    n = _write_rows(path, ["ADDRESS", "TRANSACTION_COUNT"], rows)
    logger.info("report_counts_written", path=str(path), address_count=n)
    return path


def _fmt_time(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def write_stats_csv(
    path: str | Path,
    unique_count: int,
    total_records: int,
    records_by_chain: Mapping[str, int],
    period_start: datetime | str,
    period_end: datetime | str,
    chains: Iterable[str],
) -> Path:
    """Write run statistics; every chain in chains gets a row (0 when it was not processed)."""
    path = Path(path)
    rows = [
        {"METRIC": "Time Period Start", "VALUE": _fmt_time(period_start)},
        {"METRIC": "Time Period End", "VALUE": _fmt_time(period_end)},
        {"METRIC": "Total Unique Wallets", "VALUE": unique_count},
        {"METRIC": "Total Transactions", "VALUE": total_records},
    ]
    for chain in chains:
        rows.append({"METRIC": f"Transactions on {chain}", "VALUE": records_by_chain.get(chain, 0)})
    _write_rows(path, ["METRIC", "VALUE"], rows)
    logger.info("report_stats_written", path=str(path))
    return path

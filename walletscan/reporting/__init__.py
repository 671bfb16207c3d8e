"""
CSV report writers: unique addresses, per-address counts, run statistics.
"""

from walletscan.reporting.csv_reports import (
    derived_report_paths,
    write_addresses_csv,
    write_counts_csv,
    write_stats_csv,
)

__all__ = [
    "derived_report_paths",
    "write_addresses_csv",
    "write_counts_csv",
    "write_stats_csv",
]

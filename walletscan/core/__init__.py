"""
Core cross-cutting pieces shared by extraction, ingestion, and the CLI.
"""

from walletscan.core.exceptions import (
    ConfigError,
    RecordStoreError,
    ResolutionError,
    WalletScanError,
)

__all__ = ["ConfigError", "RecordStoreError", "ResolutionError", "WalletScanError"]

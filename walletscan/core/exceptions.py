"""
Application-level exceptions.

Extraction and aggregation never raise these to callers; ResolutionError is
caught at the resolver call site. ConfigError and RecordStoreError are fatal
for the CLI (or for one chain, in the pipeline).
"""

from __future__ import annotations


class WalletScanError(Exception):
    """Base class for all walletscan errors."""


class ConfigError(WalletScanError):
    """Missing or invalid environment configuration."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = list(missing or [])


class ResolutionError(WalletScanError):
    """A transaction hash could not be resolved to a transaction."""

    def __init__(self, tx_hash: str, reason: str) -> None:
        super().__init__(f"Could not resolve transaction {tx_hash!r}: {reason}")
        self.tx_hash = tx_hash
        self.reason = reason


class RecordStoreError(WalletScanError):
    """The record store (MongoDB) could not be reached or queried."""

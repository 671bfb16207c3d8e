"""
Configuration management for WalletScan.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for MongoDB, RPC, and output settings.
"""

from walletscan.config.env import (  # noqa: F401
    ALL_CHAINS,
    Settings,
    load_settings,
    validate_settings,
)

__all__ = ["ALL_CHAINS", "Settings", "load_settings", "validate_settings"]

"""
Environment variable loading and validation for WalletScan.

- MONGODB_URI, MONGODB_DB_NAME: record store (required)
- MONGODB_COLLECTION: collection holding captured RPC traffic (default: venn-guard-txs)
- START_TIMESTAMP: minimum record timestamp, unix seconds (required)
- END_TIMESTAMP: maximum record timestamp, unix seconds (optional)
- <CHAIN>_RPC_URL: RPC endpoint per chain, e.g. BNB_RPC_URL, MAINNET_RPC_URL
- CHAINS: comma-separated subset of chains to process (default: all)
- OUTPUT_FILE, RPC_TIMEOUT_SEC, EXTRACT_WORKERS
- Loads .env from the working directory or project root when available.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from walletscan.core.exceptions import ConfigError

_CONFIG_DIR = Path(__file__).resolve().parent
_ROOT = _CONFIG_DIR.parent.parent
_ENV_PATH = _ROOT / ".env"

ALL_CHAINS: tuple[str, ...] = ("bnb", "mainnet", "bnbtestnet", "holesky")

DEFAULT_COLLECTION = "venn-guard-txs"
DEFAULT_OUTPUT_FILE = "all_chains_unique_addresses.csv"
DEFAULT_RPC_TIMEOUT_SEC = 10.0
DEFAULT_WORKERS = 1


def load_walletscan_env() -> None:
    """Load .env from the current directory, then project root. Existing env vars win."""
    load_dotenv(find_dotenv(usecwd=True))
    load_dotenv(_ENV_PATH)


def rpc_env_var(chain: str) -> str:
    """Environment variable holding the RPC URL for a chain (bnb -> BNB_RPC_URL)."""
    return f"{chain.strip().upper()}_RPC_URL"


@dataclass(frozen=True)
class Settings:
    """Resolved run configuration. Build via load_settings()."""

    mongodb_uri: str
    mongodb_db_name: str
    start_timestamp: int | None
    end_timestamp: int | None = None
    mongodb_collection: str = DEFAULT_COLLECTION
    chains: tuple[str, ...] = ALL_CHAINS
    rpc_urls: dict[str, str] = field(default_factory=dict)
    output_file: str = DEFAULT_OUTPUT_FILE
    rpc_timeout_sec: float = DEFAULT_RPC_TIMEOUT_SEC
    workers: int = DEFAULT_WORKERS

    def rpc_url_for(self, chain: str) -> str | None:
        return self.rpc_urls.get(chain.strip().lower())

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the given non-None fields replaced (CLI overrides)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _parse_int(name: str, raw: str | None) -> int | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return int(raw, 10)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _parse_float(name: str, raw: str | None, default: float) -> float:
    raw = (raw or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def _parse_chains(raw: str | None) -> tuple[str, ...]:
    raw = (raw or "").strip()
    if not raw:
        return ALL_CHAINS
    chains = tuple(c.strip().lower() for c in raw.split(",") if c.strip())
    return chains or ALL_CHAINS


def validate_settings(settings: Settings) -> None:
    """
    Raise ConfigError listing every missing variable.

    Required vars are reported first, then the RPC URLs of the selected chains.
    """
    missing = []
    if not settings.mongodb_uri:
        missing.append("MONGODB_URI")
    if not settings.mongodb_db_name:
        missing.append("MONGODB_DB_NAME")
    if settings.start_timestamp is None:
        missing.append("START_TIMESTAMP")
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}",
            missing=missing,
        )
    missing_rpc = [rpc_env_var(c) for c in settings.chains if not settings.rpc_url_for(c)]
    if missing_rpc:
        raise ConfigError(
            f"Missing RPC URLs for chains: {', '.join(missing_rpc)}",
            missing=missing_rpc,
        )


def load_settings(environ: Mapping[str, str] | None = None, *, validate: bool = True) -> Settings:
    """
    Build Settings from the environment (loading .env first when reading os.environ).

    Pass environ to read from an explicit mapping instead (tests).
    """
    if environ is None:
        load_walletscan_env()
        environ = os.environ
    chains = _parse_chains(environ.get("CHAINS"))
    rpc_urls = {}
    for chain in set(ALL_CHAINS) | set(chains):
        url = (environ.get(rpc_env_var(chain)) or "").strip()
        if url:
            rpc_urls[chain] = url

    workers = _parse_int("EXTRACT_WORKERS", environ.get("EXTRACT_WORKERS")) or DEFAULT_WORKERS
    settings = Settings(
        mongodb_uri=(environ.get("MONGODB_URI") or "").strip(),
        mongodb_db_name=(environ.get("MONGODB_DB_NAME") or "").strip(),
        start_timestamp=_parse_int("START_TIMESTAMP", environ.get("START_TIMESTAMP")),
        end_timestamp=_parse_int("END_TIMESTAMP", environ.get("END_TIMESTAMP")),
        mongodb_collection=(environ.get("MONGODB_COLLECTION") or "").strip() or DEFAULT_COLLECTION,
        chains=chains,
        rpc_urls=rpc_urls,
        output_file=(environ.get("OUTPUT_FILE") or "").strip() or DEFAULT_OUTPUT_FILE,
        rpc_timeout_sec=_parse_float("RPC_TIMEOUT_SEC", environ.get("RPC_TIMEOUT_SEC"), DEFAULT_RPC_TIMEOUT_SEC),
        workers=max(1, workers),
    )
    if validate:
        validate_settings(settings)
    return settings

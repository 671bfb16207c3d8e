"""
Pytest fixtures for WalletScan tests. Stored documents are plain dicts; the
resolver is a dict-backed fake, so no RPC endpoint or MongoDB is needed.
"""

from __future__ import annotations

from typing import Any

import pytest

from walletscan.config.env import ALL_CHAINS, rpc_env_var
from walletscan.core.exceptions import ResolutionError
from walletscan.rpc.resolver import ResolvedTransaction


class FakeResolver:
    """Resolves hashes from a dict; unknown hashes raise ResolutionError. Records every call."""

    def __init__(self, senders: dict[str, str | None] | None = None) -> None:
        self.senders = dict(senders or {})
        self.calls: list[Any] = []
        self.closed = False

    def __call__(self, tx_hash: Any) -> ResolvedTransaction:
        self.calls.append(tx_hash)
        if tx_hash not in self.senders:
            raise ResolutionError(str(tx_hash), "transaction not found")
        return ResolvedTransaction(hash=tx_hash, from_address=self.senders[tx_hash])

    def close(self) -> None:
        self.closed = True


def make_doc(
    method: str | None,
    params: list | None = None,
    result: Any = None,
    *,
    chain: str = "bnb",
    timestamp: int = 1_700_000_000,
    doc_id: str = "doc-1",
) -> dict[str, Any]:
    """Build a stored document in the captured request.body / response.body layout."""
    doc: dict[str, Any] = {"_id": doc_id, "target": chain, "timestamp": timestamp, "request": {"body": {}}}
    if method is not None:
        doc["method"] = method
        doc["request"]["body"]["method"] = method
    if params is not None:
        doc["request"]["body"]["params"] = params
    if result is not None:
        doc["response"] = {"body": {"jsonrpc": "2.0", "id": 1, "result": result}}
    return doc


@pytest.fixture
def resolver():
    """Empty fake resolver; tests add hashes via resolver.senders."""
    return FakeResolver()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every WalletScan variable from the environment."""
    names = [
        "MONGODB_URI",
        "MONGODB_DB_NAME",
        "MONGODB_COLLECTION",
        "START_TIMESTAMP",
        "END_TIMESTAMP",
        "CHAINS",
        "OUTPUT_FILE",
        "RPC_TIMEOUT_SEC",
        "EXTRACT_WORKERS",
    ] + [rpc_env_var(c) for c in ALL_CHAINS]
    for name in names:
        # setenv first so teardown also removes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def full_env() -> dict[str, str]:
    """A complete environment mapping for load_settings(environ=...)."""
    env = {
        "MONGODB_URI": "mongodb://localhost:27017",
        "MONGODB_DB_NAME": "guard",
        "START_TIMESTAMP": "1700000000",
    }
    for chain in ALL_CHAINS:
        env[rpc_env_var(chain)] = f"https://{chain}.rpc.example"
    return env

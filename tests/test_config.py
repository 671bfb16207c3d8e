"""
Tests for environment configuration (config.env).
"""

from __future__ import annotations

import pytest

from walletscan.config.env import (
    ALL_CHAINS,
    DEFAULT_COLLECTION,
    DEFAULT_OUTPUT_FILE,
    load_settings,
    rpc_env_var,
    validate_settings,
)
from walletscan.core.exceptions import ConfigError


def test_rpc_env_var():
    assert rpc_env_var("bnb") == "BNB_RPC_URL"
    assert rpc_env_var(" bnbtestnet ") == "BNBTESTNET_RPC_URL"


def test_load_settings_defaults(full_env):
    settings = load_settings(full_env)
    assert settings.mongodb_uri == "mongodb://localhost:27017"
    assert settings.mongodb_db_name == "guard"
    assert settings.start_timestamp == 1_700_000_000
    assert settings.end_timestamp is None
    assert settings.mongodb_collection == DEFAULT_COLLECTION == "venn-guard-txs"
    assert settings.chains == ALL_CHAINS
    assert settings.output_file == DEFAULT_OUTPUT_FILE
    assert settings.rpc_timeout_sec == 10.0
    assert settings.workers == 1
    assert settings.rpc_url_for("BNB") == "https://bnb.rpc.example"


def test_load_settings_overrides(full_env):
    env = dict(
        full_env,
        END_TIMESTAMP="1700086400",
        MONGODB_COLLECTION="other-txs",
        CHAINS="holesky, BNB",
        OUTPUT_FILE="out/wallets.csv",
        RPC_TIMEOUT_SEC="2.5",
        EXTRACT_WORKERS="8",
    )
    settings = load_settings(env)
    assert settings.end_timestamp == 1_700_086_400
    assert settings.mongodb_collection == "other-txs"
    assert settings.chains == ("holesky", "bnb")
    assert settings.output_file == "out/wallets.csv"
    assert settings.rpc_timeout_sec == 2.5
    assert settings.workers == 8


def test_missing_required_vars_listed_together():
    with pytest.raises(ConfigError) as exc_info:
        load_settings({"MONGODB_URI": "mongodb://x"})
    assert exc_info.value.missing == ["MONGODB_DB_NAME", "START_TIMESTAMP"]
    assert "MONGODB_DB_NAME" in str(exc_info.value)


def test_missing_rpc_urls_for_selected_chains(full_env):
    env = dict(full_env)
    del env["HOLESKY_RPC_URL"]
    del env["BNB_RPC_URL"]
    with pytest.raises(ConfigError, match="Missing RPC URLs") as exc_info:
        load_settings(env)
    assert exc_info.value.missing == ["BNB_RPC_URL", "HOLESKY_RPC_URL"]
    # Only the selected chains need an RPC URL
    settings = load_settings(dict(env, CHAINS="mainnet"))
    assert settings.chains == ("mainnet",)


def test_invalid_integer(full_env):
    with pytest.raises(ConfigError, match="START_TIMESTAMP"):
        load_settings(dict(full_env, START_TIMESTAMP="yesterday"))
    with pytest.raises(ConfigError, match="RPC_TIMEOUT_SEC"):
        load_settings(dict(full_env, RPC_TIMEOUT_SEC="fast"))


def test_zero_start_timestamp_is_valid(full_env):
    assert load_settings(dict(full_env, START_TIMESTAMP="0")).start_timestamp == 0


def test_with_overrides_ignores_none(full_env):
    settings = load_settings(full_env)
    updated = settings.with_overrides(chains=("bnb",), start_timestamp=None, workers=2)
    assert updated.chains == ("bnb",)
    assert updated.start_timestamp == settings.start_timestamp
    assert updated.workers == 2
    validate_settings(updated)


def test_load_settings_from_os_environ(clean_env, full_env, tmp_path):
    clean_env.chdir(tmp_path)
    for key, value in full_env.items():
        clean_env.setenv(key, value)
    clean_env.setenv("CHAINS", "bnb")
    settings = load_settings()
    assert settings.chains == ("bnb",)
    assert settings.start_timestamp == 1_700_000_000


def test_dotenv_file_is_loaded(clean_env, tmp_path):
    clean_env.chdir(tmp_path)
    (tmp_path / ".env").write_text(
        "MONGODB_URI=mongodb://dotenv\nMONGODB_DB_NAME=guard\nSTART_TIMESTAMP=42\n"
        "CHAINS=holesky\nHOLESKY_RPC_URL=https://holesky.rpc.example\n",
        encoding="utf-8",
    )
    settings = load_settings()
    assert settings.mongodb_uri == "mongodb://dotenv"
    assert settings.start_timestamp == 42
    assert settings.rpc_url_for("holesky") == "https://holesky.rpc.example"

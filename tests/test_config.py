"""
Tests for environment-driven settings: required values fail fast, knobs parse.
"""

from __future__ import annotations

import pytest

from backend_eventwatch.config import get_settings
from backend_eventwatch.config.env import mask_url
from backend_eventwatch.core.exceptions import ConfigError

VALID_ADDRESS = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"


def test_missing_node_url(clean_env):
    clean_env.setenv("CONTRACT_ADDRESS", VALID_ADDRESS)
    with pytest.raises(ConfigError, match="NODE_URL must be set"):
        get_settings()


def test_node_url_must_be_websocket(clean_env):
    clean_env.setenv("NODE_URL", "https://node.example")
    clean_env.setenv("CONTRACT_ADDRESS", VALID_ADDRESS)
    with pytest.raises(ConfigError, match="ws://"):
        get_settings()


def test_missing_contract_address(clean_env):
    clean_env.setenv("NODE_URL", "ws://localhost:8546")
    with pytest.raises(ConfigError, match="CONTRACT_ADDRESS must be set"):
        get_settings()


@pytest.mark.parametrize("address", ["0x1234", "not-an-address", "0x" + "zz" * 20])
def test_malformed_contract_address(clean_env, address):
    clean_env.setenv("NODE_URL", "ws://localhost:8546")
    clean_env.setenv("CONTRACT_ADDRESS", address)
    with pytest.raises(ConfigError, match="Invalid contract address"):
        get_settings()


def test_defaults_and_checksum_address(clean_env):
    clean_env.setenv("NODE_URL", "wss://node.example/v3/key")
    clean_env.setenv("CONTRACT_ADDRESS", VALID_ADDRESS)

    settings = get_settings()

    assert settings.node_url == "wss://node.example/v3/key"
    assert settings.contract_address == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
    assert settings.read_timeout_sec == 300.0
    assert settings.reconnect_backoff_sec == 5.0
    assert settings.max_connect_attempts == 5
    assert settings.from_block is None


def test_optional_knobs(clean_env):
    clean_env.setenv("NODE_URL", "ws://localhost:8546")
    clean_env.setenv("CONTRACT_ADDRESS", VALID_ADDRESS)
    clean_env.setenv("READ_TIMEOUT_SEC", "60")
    clean_env.setenv("MAX_CONNECT_ATTEMPTS", "3")
    clean_env.setenv("FROM_BLOCK", "0x10")
    clean_env.setenv("WS_PING_INTERVAL", "0")

    settings = get_settings()

    assert settings.read_timeout_sec == 60.0
    assert settings.max_connect_attempts == 3
    assert settings.from_block == 16
    assert settings.ws_ping_interval is None


@pytest.mark.parametrize("name,value", [("READ_TIMEOUT_SEC", "soon"), ("FROM_BLOCK", "latest"), ("FROM_BLOCK", "-1")])
def test_bad_knob_values(clean_env, name, value):
    clean_env.setenv("NODE_URL", "ws://localhost:8546")
    clean_env.setenv("CONTRACT_ADDRESS", VALID_ADDRESS)
    clean_env.setenv(name, value)
    with pytest.raises(ConfigError, match=name):
        get_settings()


def test_mask_url():
    assert mask_url("wss://mainnet.infura.io/ws/v3/secret") == "wss://mainnet.infura.io/***"
    assert mask_url("ws://localhost:8546") == "ws://localhost:8546"

"""
Application settings.

Collects the environment values from config.env into one typed object used
by the entry point to build the node client and event listener.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_eventwatch.config.env import (
    get_contract_address,
    get_float,
    get_int,
    get_node_url,
)

DEFAULT_READ_TIMEOUT_SEC = 300.0
DEFAULT_RECONNECT_BACKOFF_SEC = 5.0
DEFAULT_MAX_CONNECT_ATTEMPTS = 5
DEFAULT_WS_PING_INTERVAL = 30.0
DEFAULT_WS_PING_TIMEOUT = 10.0
DEFAULT_WS_OPEN_TIMEOUT = 10.0


@dataclass(frozen=True)
class WatcherSettings:
    """Config for the node client and event listener."""

    node_url: str
    contract_address: str
    read_timeout_sec: float = DEFAULT_READ_TIMEOUT_SEC
    reconnect_backoff_sec: float = DEFAULT_RECONNECT_BACKOFF_SEC
    max_connect_attempts: int = DEFAULT_MAX_CONNECT_ATTEMPTS
    ws_ping_interval: float | None = DEFAULT_WS_PING_INTERVAL
    ws_ping_timeout: float | None = DEFAULT_WS_PING_TIMEOUT
    ws_open_timeout: float = DEFAULT_WS_OPEN_TIMEOUT
    from_block: int | None = None


def get_settings() -> WatcherSettings:
    """
    Return the current application settings.

    Raises:
        ConfigError: NODE_URL or CONTRACT_ADDRESS missing or malformed, or a
            numeric knob that does not parse.
    """
    max_attempts = get_int("MAX_CONNECT_ATTEMPTS", DEFAULT_MAX_CONNECT_ATTEMPTS)
    return WatcherSettings(
        node_url=get_node_url(),
        contract_address=get_contract_address(),
        read_timeout_sec=get_float("READ_TIMEOUT_SEC", DEFAULT_READ_TIMEOUT_SEC),
        reconnect_backoff_sec=get_float("RECONNECT_BACKOFF_SEC", DEFAULT_RECONNECT_BACKOFF_SEC),
        max_connect_attempts=max(1, max_attempts or DEFAULT_MAX_CONNECT_ATTEMPTS),
        ws_ping_interval=get_float("WS_PING_INTERVAL", DEFAULT_WS_PING_INTERVAL) or None,
        ws_ping_timeout=get_float("WS_PING_TIMEOUT", DEFAULT_WS_PING_TIMEOUT) or None,
        ws_open_timeout=get_float("WS_OPEN_TIMEOUT", DEFAULT_WS_OPEN_TIMEOUT),
        from_block=get_int("FROM_BLOCK", None),
    )

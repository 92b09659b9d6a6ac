"""
Environment variable loading and validation for EventWatch.

- NODE_URL: WebSocket endpoint of the node (ws:// or wss://), required
- CONTRACT_ADDRESS: address of the watched contract, required
- Tuning knobs (timeouts, backoff, retry ceiling, replay start block)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from eth_utils import is_address, to_checksum_address

from backend_eventwatch.core.exceptions import ConfigError

# Project root: config is backend_eventwatch/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

_WS_SCHEMES = ("ws://", "wss://")


def load_eventwatch_env() -> None:
    """Load .env from project root. Safe to call multiple times; real env wins."""
    load_dotenv(_ENV_PATH, override=False)


def get_node_url() -> str:
    """Return NODE_URL; must be set and use a WebSocket scheme."""
    load_eventwatch_env()
    url = (os.getenv("NODE_URL") or "").strip()
    if not url:
        raise ConfigError("NODE_URL must be set in the environment or .env file")
    if not url.lower().startswith(_WS_SCHEMES):
        raise ConfigError(f"NODE_URL must be a ws:// or wss:// endpoint, got {url!r}")
    return url


def get_contract_address() -> str:
    """Return CONTRACT_ADDRESS in checksum form."""
    load_eventwatch_env()
    raw = (os.getenv("CONTRACT_ADDRESS") or "").strip()
    if not raw:
        raise ConfigError("CONTRACT_ADDRESS must be set in the environment or .env file")
    if not is_address(raw):
        raise ConfigError(f"Invalid contract address format: {raw!r}")
    return to_checksum_address(raw)


def get_float(name: str, default: float) -> float:
    load_eventwatch_env()
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {raw!r}")
    return value


def get_int(name: str, default: int | None) -> int | None:
    load_eventwatch_env()
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw, 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must be non-negative, got {raw!r}")
    return value


def mask_url(url: str) -> str:
    """Hide the API key path segment many providers put in the URL."""
    scheme, sep, rest = url.partition("://")
    host, slash, path = rest.partition("/")
    if not sep or not path:
        return url
    return f"{scheme}://{host}/***"

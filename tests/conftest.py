"""
Pytest fixtures for EventWatch tests. Fake WebSocket, node session and node
client so listener and session logic run without a node.
"""

from __future__ import annotations

import asyncio
import json
from collections import deque
from typing import Any, Callable, Iterable

import pytest
from eth_abi import encode
from eth_utils import encode_hex
from websockets.exceptions import ConnectionClosedOK

from backend_eventwatch.core.exceptions import ConnectionExhaustedError

CONTRACT = "0xabcd000000000000000000000000000000000001"
ACCOUNT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
ACCOUNT_TOPIC = "0x" + "00" * 12 + ACCOUNT[2:].lower()
TX_HASH = "0x" + "ab" * 32
SIG_TOPIC = "0x" + "11" * 32

# Subscription script markers
STALL = object()


def make_log(
    block: int | None = 1000,
    *,
    tx_hash: str | None = TX_HASH,
    topics: list[str] | None = None,
) -> dict[str, Any]:
    """Log object as delivered in an eth_subscription notification."""
    item: dict[str, Any] = {
        "address": CONTRACT,
        "topics": topics if topics is not None else [SIG_TOPIC, ACCOUNT_TOPIC],
        "data": "0x",
        "logIndex": "0x0",
        "removed": False,
    }
    if tx_hash is not None:
        item["transactionHash"] = tx_hash
    if block is not None:
        item["blockNumber"] = hex(block)
    return item


def uint_result(value: int) -> str:
    return encode_hex(encode(["uint256"], [value]))


class FakeWebSocket:
    """Scripted WebSocket: frames are str/dict, or exceptions to raise from recv()."""

    def __init__(
        self,
        frames: Iterable[Any] = (),
        responder: Callable[[dict[str, Any]], list[Any]] | None = None,
    ) -> None:
        self.incoming: deque[Any] = deque(frames)
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self._responder = responder

    async def send(self, raw: str) -> None:
        msg = json.loads(raw)
        self.sent.append(msg)
        if self._responder is not None:
            self.incoming.extend(self._responder(msg))

    async def recv(self) -> str:
        if not self.incoming:
            raise ConnectionClosedOK(None, None)
        item = self.incoming.popleft()
        if isinstance(item, BaseException):
            raise item
        return item if isinstance(item, str) else json.dumps(item)

    async def close(self) -> None:
        self.closed = True


class FakeSubscription:
    def __init__(self, items: Iterable[Any], subscription_id: str = "0xsub") -> None:
        self._items = deque(items)
        self.subscription_id = subscription_id

    async def next_log(self) -> Any | None:
        if not self._items:
            return None
        item = self._items.popleft()
        if item is STALL:
            await asyncio.sleep(3600)
        if isinstance(item, BaseException):
            raise item
        return item


class FakeSession:
    """
    Node session double. Answers eth_call with values[block], transaction
    lookups from transactions, eth_getLogs with logs.
    """

    def __init__(
        self,
        name: str,
        items: Iterable[Any] = (),
        *,
        values: dict[int, int] | None = None,
        transactions: dict[str, Any] | None = None,
        logs: list[dict[str, Any]] | None = None,
        subscribe_error: BaseException | None = None,
        calls: list[tuple[str, ...]] | None = None,
    ) -> None:
        self.name = name
        self.items = list(items)
        self.values = values or {}
        self.transactions = transactions or {}
        self.logs = logs or []
        self.subscribe_error = subscribe_error
        self.calls = calls if calls is not None else []
        self.requests: list[tuple[str, list[Any]]] = []
        self.filters: list[Any] = []
        self.closed = False

    async def subscribe_logs(self, event_filter: Any) -> FakeSubscription:
        self.calls.append(("subscribe", self.name))
        self.filters.append(event_filter)
        if self.subscribe_error is not None:
            raise self.subscribe_error
        return FakeSubscription(self.items, subscription_id=f"0x{self.name}")

    async def request(self, method: str, params: list[Any]) -> Any:
        self.requests.append((method, params))
        if method == "eth_call":
            return uint_result(self.values.get(int(params[1], 16), 0))
        if method == "eth_getTransactionByHash":
            return self.transactions.get(params[0])
        if method == "eth_getLogs":
            return self.logs
        raise AssertionError(f"unexpected request {method}")

    async def close(self) -> None:
        self.closed = True


class FakeClient:
    """Node client double; reconnect() moves to the next session, then gives up."""

    def __init__(self, sessions: list[FakeSession], calls: list[tuple[str, ...]]) -> None:
        self._pending = list(sessions)
        self.current = self._pending.pop(0)
        self.calls = calls
        self.reconnects = 0

    def current_handle(self) -> FakeSession:
        return self.current

    async def reconnect(self) -> FakeSession:
        self.calls.append(("reconnect",))
        self.reconnects += 1
        if not self._pending:
            raise ConnectionExhaustedError("ws://node", 5)
        self.current = self._pending.pop(0)
        return self.current


@pytest.fixture
def calls() -> list[tuple[str, ...]]:
    return []


@pytest.fixture
def clean_env(monkeypatch):
    """Drop watcher env vars and stop .env loading so tests see only what they set."""
    import backend_eventwatch.config.env as env

    for name in (
        "NODE_URL",
        "CONTRACT_ADDRESS",
        "READ_TIMEOUT_SEC",
        "RECONNECT_BACKOFF_SEC",
        "MAX_CONNECT_ATTEMPTS",
        "WS_PING_INTERVAL",
        "WS_PING_TIMEOUT",
        "WS_OPEN_TIMEOUT",
        "FROM_BLOCK",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(env, "load_eventwatch_env", lambda: None)
    return monkeypatch

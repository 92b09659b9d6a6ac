"""
JSON-RPC 2.0 session over one WebSocket to an EVM node.

One task drives the session at a time: request() reads frames until its own
response arrives and buffers any eth_subscription notifications it sees on
the way, so next_notification() later returns them in arrival order.
"""

from __future__ import annotations

import json
from collections import deque
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosedOK

from backend_eventwatch.core.exceptions import RpcError, RpcProtocolError, SubscriptionError
from backend_eventwatch.eventwatch_logging import get_logger

logger = get_logger(__name__)

_WS_CLOSE_TIMEOUT = 5.0
_SUBSCRIPTION_METHOD = "eth_subscription"


class RpcSession:
    """Live connection handle. Dead once closed; never reopened."""

    def __init__(self, ws: Any, url: str = "") -> None:
        self._ws = ws
        self.url = url
        self._next_rpc_id = 0
        self._notifications: dict[str, deque[Any]] = {}

    @classmethod
    async def open(
        cls,
        url: str,
        *,
        ping_interval: float | None = None,
        ping_timeout: float | None = None,
        open_timeout: float | None = None,
    ) -> "RpcSession":
        ws = await websockets.connect(
            url,
            ping_interval=ping_interval,
            ping_timeout=ping_timeout,
            open_timeout=open_timeout,
            close_timeout=_WS_CLOSE_TIMEOUT,
        )
        return cls(ws, url)

    def _next_id(self) -> int:
        self._next_rpc_id += 1
        return self._next_rpc_id

    async def _recv_message(self) -> dict[str, Any]:
        raw = await self._ws.recv()
        try:
            msg = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            raise RpcProtocolError(f"Frame is not valid JSON: {e}") from e
        if not isinstance(msg, dict):
            raise RpcProtocolError(f"Frame is not a JSON-RPC object: {type(msg).__name__}")
        return msg

    def _route(self, msg: dict[str, Any]) -> None:
        """Buffer a notification for its subscription; drop anything else."""
        if msg.get("method") == _SUBSCRIPTION_METHOD:
            params = msg.get("params") or {}
            sub_id = params.get("subscription")
            buffered = self._notifications.get(sub_id)
            if buffered is None:
                logger.debug("rpc_unknown_subscription", subscription_id=sub_id)
                return
            buffered.append(params.get("result"))
            return
        logger.debug("rpc_unexpected_message", message_id=msg.get("id"))

    async def request(self, method: str, params: list[Any]) -> Any:
        """Send one request and return its result; RpcError on an error response."""
        req_id = self._next_id()
        req = {"jsonrpc": "2.0", "id": req_id, "method": method, "params": params}
        await self._ws.send(json.dumps(req))
        while True:
            msg = await self._recv_message()
            if msg.get("id") != req_id:
                self._route(msg)
                continue
            if msg.get("error") is not None:
                raise RpcError(method, msg["error"])
            return msg.get("result")

    async def subscribe_logs(self, event_filter: Any) -> "LogSubscription":
        """eth_subscribe to logs matching the filter."""
        sub_id = await self.request("eth_subscribe", ["logs", event_filter.to_params()])
        if not isinstance(sub_id, str) or not sub_id:
            raise SubscriptionError(f"eth_subscribe returned invalid subscription id: {sub_id!r}")
        self._notifications.setdefault(sub_id, deque())
        return LogSubscription(self, sub_id)

    async def next_notification(self, subscription_id: str) -> Any | None:
        """
        Next payload for the subscription, or None when the node closed the
        socket cleanly. An abnormal close raises ConnectionClosedError.
        """
        buffered = self._notifications.get(subscription_id)
        if buffered is None:
            raise SubscriptionError(f"Not subscribed: {subscription_id}")
        while not buffered:
            try:
                msg = await self._recv_message()
            except ConnectionClosedOK:
                return None
            self._route(msg)
        return buffered.popleft()

    async def close(self) -> None:
        self._notifications.clear()
        await self._ws.close()


class LogSubscription:
    """Handle on one eth_subscribe("logs") stream of a session."""

    def __init__(self, session: RpcSession, subscription_id: str) -> None:
        self.session = session
        self.subscription_id = subscription_id

    async def next_log(self) -> Any | None:
        """Raw log object, or None at end of stream."""
        return await self.session.next_notification(self.subscription_id)

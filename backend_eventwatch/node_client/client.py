"""
Node client: owns the single WebSocket session to the node.

Responsibilities:
- Connect with a hard retry ceiling (fixed backoff between attempts) so a
  dead endpoint ends the process instead of spinning forever.
- Replace the session on reconnect; the previous one is closed and never
  handed out again.
- Hand out the current session, or raise NotConnectedError before the first
  successful connect.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from websockets.exceptions import WebSocketException

from backend_eventwatch.config.env import mask_url
from backend_eventwatch.core.exceptions import ConnectionExhaustedError, NotConnectedError
from backend_eventwatch.eventwatch_logging import get_logger
from backend_eventwatch.node_client.session import RpcSession

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BACKOFF_SEC = 5.0

Connector = Callable[[], Awaitable[RpcSession]]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class RetryState:
    """Attempt counter for one connect-or-reconnect operation."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    attempts: int = 0

    def record_failure(self) -> bool:
        """Count a failed attempt; True once the ceiling is reached."""
        self.attempts += 1
        return self.attempts >= self.max_attempts

    def reset(self) -> None:
        self.attempts = 0


class NodeClient:
    """
    Connection manager for one node endpoint.

    The session it holds is shared with the event listener, which must call
    current_handle() again after every reconnect.
    """

    def __init__(
        self,
        node_url: str,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_sec: float = DEFAULT_BACKOFF_SEC,
        ws_ping_interval: float | None = 30.0,
        ws_ping_timeout: float | None = 10.0,
        ws_open_timeout: float | None = 10.0,
        connector: Connector | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not node_url.strip():
            raise ValueError("node_url must be non-empty")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._node_url = node_url.strip()
        self._backoff_sec = backoff_sec
        self._ws_ping_interval = ws_ping_interval
        self._ws_ping_timeout = ws_ping_timeout
        self._ws_open_timeout = ws_open_timeout
        self._connector = connector or self._open_session
        self._sleep = sleep
        self._retry = RetryState(max_attempts=max_attempts)
        self._session: RpcSession | None = None
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def retry_state(self) -> RetryState:
        return self._retry

    async def _open_session(self) -> RpcSession:
        return await RpcSession.open(
            self._node_url,
            ping_interval=self._ws_ping_interval,
            ping_timeout=self._ws_ping_timeout,
            open_timeout=self._ws_open_timeout,
        )

    async def connect_with_retry(self) -> RpcSession:
        """
        Open a session, retrying with a fixed backoff.

        Raises:
            ConnectionExhaustedError: max_attempts consecutive failures.
        """
        self._state = ConnectionState.CONNECTING
        self._retry.reset()
        url = mask_url(self._node_url)
        while True:
            try:
                session = await self._connector()
            except (OSError, WebSocketException, asyncio.TimeoutError) as e:
                exhausted = self._retry.record_failure()
                logger.warning(
                    "node_connect_failed",
                    url=url,
                    attempt=self._retry.attempts,
                    max_attempts=self._retry.max_attempts,
                    error=str(e) or type(e).__name__,
                )
                if exhausted:
                    attempts = self._retry.attempts
                    self._state = ConnectionState.DISCONNECTED
                    self._retry.reset()
                    logger.error("node_connect_exhausted", url=url, attempts=attempts)
                    raise ConnectionExhaustedError(url, attempts) from e
                await self._sleep(self._backoff_sec)
                continue
            self._session = session
            self._retry.reset()
            self._state = ConnectionState.CONNECTED
            logger.info("node_connected", url=url)
            return session

    async def reconnect(self) -> RpcSession:
        """Drop the current session (dead or not) and connect again."""
        logger.info("node_reconnecting", url=mask_url(self._node_url))
        await self._discard_session()
        return await self.connect_with_retry()

    def current_handle(self) -> RpcSession:
        """Return the live session; NotConnectedError before the first connect."""
        if self._session is None:
            raise NotConnectedError(
                "No node session: call connect_with_retry() or reconnect() first"
            )
        return self._session

    async def close(self) -> None:
        await self._discard_session()
        self._state = ConnectionState.DISCONNECTED

    async def _discard_session(self) -> None:
        old, self._session = self._session, None
        if old is None:
            return
        try:
            await old.close()
        except Exception as e:
            logger.debug("node_session_close_failed", error=str(e))

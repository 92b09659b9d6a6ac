"""
Contract event listener: log subscription and event emission.

Responsibilities:
- Build the NumberUpdatedEvent filter once and reuse it across reconnects.
- Subscribe with the node client's current session, read logs with a stall
  timeout, decode each one and hand it to the reporter in delivery order.
- Route every fault, clean stream end and stall through one recovery step:
  fixed backoff, reconnect once, subscribe again on the fresh session.
- Optionally replay past events before going live.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Awaitable, Callable

from websockets.exceptions import ConnectionClosed

from backend_eventwatch.contract.abi import CONTRACT_ABI, NUMBER_UPDATED_EVENT
from backend_eventwatch.contract.binding import get_contract
from backend_eventwatch.core.exceptions import EventListenerError, SubscriptionError
from backend_eventwatch.event_listener.models import DecodedEvent, EventFilter, RawLog
from backend_eventwatch.event_listener.processor import process_log
from backend_eventwatch.eventwatch_logging import bind_subscription, get_logger
from backend_eventwatch.node_client.client import NodeClient
from backend_eventwatch.reporter.console import display_information

logger = get_logger(__name__)

DEFAULT_READ_TIMEOUT_SEC = 300.0
DEFAULT_BACKOFF_SEC = 5.0


class ListenerState(str, Enum):
    SUBSCRIBING = "subscribing"
    CONSUMING = "consuming"


class SessionEnd(str, Enum):
    """Why a subscription session ended without an exception."""

    STREAM_CLOSED = "stream_closed"
    STALLED = "stalled"
    STOPPED = "stopped"


def build_event_filter(contract_address: str) -> EventFilter:
    """Filter on the contract address and the NumberUpdatedEvent topic."""
    return EventFilter(
        address=contract_address,
        topics=(CONTRACT_ABI.event_topic(NUMBER_UPDATED_EVENT),),
    )


class EventListener:
    """
    Keeps one NumberUpdatedEvent subscription alive for the process.

    Runs until stop() is called or the node client gives up reconnecting
    (ConnectionExhaustedError propagates to the caller).
    """

    def __init__(
        self,
        client: NodeClient,
        contract_address: str,
        *,
        on_event: Callable[[DecodedEvent], None] = display_information,
        read_timeout_sec: float = DEFAULT_READ_TIMEOUT_SEC,
        backoff_sec: float = DEFAULT_BACKOFF_SEC,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if read_timeout_sec <= 0:
            raise ValueError("read_timeout_sec must be positive")
        self._client = client
        self._contract_address = contract_address
        self._filter = build_event_filter(contract_address)
        self._on_event = on_event
        self._read_timeout = read_timeout_sec
        self._backoff_sec = backoff_sec
        self._sleep = sleep
        self._state = ListenerState.SUBSCRIBING
        self._stop = asyncio.Event()

    @property
    def event_filter(self) -> EventFilter:
        return self._filter

    @property
    def state(self) -> ListenerState:
        return self._state

    def stop(self) -> None:
        """Signal the listener to stop after the current read."""
        self._stop.set()

    async def listen_for_events(self) -> None:
        """Subscribe and consume until stopped; reconnect after every session."""
        run_id = 0
        while not self._stop.is_set():
            run_id += 1
            reason = "error"
            try:
                end = await self._subscribe_and_consume()
                reason = end.value
                logger.info("listener_session_ended", run_id=run_id, reason=reason)
            except EventListenerError as e:
                reason = type(e).__name__
                logger.warning("listener_session_failed", run_id=run_id, error=str(e))
            except ConnectionClosed as e:
                reason = "disconnected"
                rcvd = e.rcvd
                logger.warning(
                    "listener_disconnected",
                    run_id=run_id,
                    code=rcvd.code if rcvd else None,
                    reason=rcvd.reason if rcvd else None,
                )
            except Exception as e:
                logger.exception("listener_session_error", run_id=run_id, error=str(e))

            if self._stop.is_set():
                break
            await self._recover(reason)
        logger.info("listener_stopped", run_id=run_id)

    async def _recover(self, reason: str) -> None:
        """The single transition back to SUBSCRIBING after any session end."""
        self._state = ListenerState.SUBSCRIBING
        logger.info("listener_reconnect", reason=reason, backoff_sec=self._backoff_sec)
        await self._sleep(self._backoff_sec)
        await self._client.reconnect()

    async def _subscribe_and_consume(self) -> SessionEnd:
        self._state = ListenerState.SUBSCRIBING
        session = self._client.current_handle()
        contract = get_contract(session, self._contract_address)
        try:
            subscription = await session.subscribe_logs(self._filter)
        except (EventListenerError, ConnectionClosed, OSError) as e:
            raise SubscriptionError(f"Failed to subscribe to logs: {e}") from e

        sub_logger = bind_subscription(subscription.subscription_id)
        sub_logger.info("listener_subscribed", contract=self._contract_address)
        self._state = ListenerState.CONSUMING

        while not self._stop.is_set():
            try:
                item = await asyncio.wait_for(subscription.next_log(), timeout=self._read_timeout)
            except asyncio.TimeoutError:
                sub_logger.info("listener_stalled", timeout_sec=self._read_timeout)
                return SessionEnd.STALLED
            if item is None:
                sub_logger.info("listener_stream_closed")
                return SessionEnd.STREAM_CLOSED
            log = RawLog.from_rpc_item(item)
            event = await process_log(session, contract, log)
            sub_logger.debug(
                "listener_event_decoded",
                tx_hash=event.transaction_hash,
                block_number=event.block_number,
            )
            self._on_event(event)
        return SessionEnd.STOPPED

    async def replay_previous(self, from_block: int) -> int:
        """
        Emit past events from from_block to latest, marked is_previous.
        Best effort: a failure is logged and the live loop takes over.
        """
        session = self._client.current_handle()
        contract = get_contract(session, self._contract_address)
        emitted = 0
        try:
            items = await session.request("eth_getLogs", [self._filter.with_block_range(from_block)])
            for item in items or []:
                log = RawLog.from_rpc_item(item)
                self._on_event(await process_log(session, contract, log, is_previous=True))
                emitted += 1
        except (EventListenerError, ConnectionClosed, OSError) as e:
            logger.warning(
                "listener_replay_failed",
                from_block=from_block,
                emitted=emitted,
                error=str(e),
            )
            return emitted
        logger.info("listener_replay_done", from_block=from_block, emitted=emitted)
        return emitted

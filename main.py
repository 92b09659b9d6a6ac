"""
Main entrypoint: connect to the node, optionally replay past events, then
watch NumberUpdatedEvent until the node is unreachable or Ctrl-C.

Env: NODE_URL, CONTRACT_ADDRESS (required); FROM_BLOCK, READ_TIMEOUT_SEC,
RECONNECT_BACKOFF_SEC, MAX_CONNECT_ATTEMPTS, WS_PING_INTERVAL, WS_PING_TIMEOUT,
WS_OPEN_TIMEOUT, LOG_LEVEL, LOG_FORMAT (optional). A .env file in the project
root is read as well.

Exit status 1 on configuration errors and when every connect attempt failed.
"""

import asyncio
import sys

# Configure structured JSON logging before other imports that may log
from backend_eventwatch.eventwatch_logging import get_logger

from backend_eventwatch.config import WatcherSettings, get_settings
from backend_eventwatch.core.exceptions import ConfigError, ConnectionExhaustedError
from backend_eventwatch.event_listener import EventListener
from backend_eventwatch.node_client import NodeClient

logger = get_logger("main")


async def run(settings: WatcherSettings) -> None:
    client = NodeClient(
        settings.node_url,
        max_attempts=settings.max_connect_attempts,
        backoff_sec=settings.reconnect_backoff_sec,
        ws_ping_interval=settings.ws_ping_interval,
        ws_ping_timeout=settings.ws_ping_timeout,
        ws_open_timeout=settings.ws_open_timeout,
    )
    await client.connect_with_retry()
    logger.info("main_monitoring_contract", contract=settings.contract_address)

    listener = EventListener(
        client,
        settings.contract_address,
        read_timeout_sec=settings.read_timeout_sec,
        backoff_sec=settings.reconnect_backoff_sec,
    )
    try:
        if settings.from_block is not None:
            await listener.replay_previous(settings.from_block)
        await listener.listen_for_events()
    finally:
        await client.close()


def main() -> None:
    """Load settings and run the watcher; exits non-zero on fatal errors."""
    try:
        settings = get_settings()
    except ConfigError as e:
        logger.error("main_config_error", error=str(e))
        sys.exit(1)

    try:
        asyncio.run(run(settings))
    except ConnectionExhaustedError as e:
        logger.error("main_connection_exhausted", attempts=e.attempts, error=str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("main_keyboard_interrupt")


if __name__ == "__main__":
    main()

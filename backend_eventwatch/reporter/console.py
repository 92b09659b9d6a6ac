"""
Console reporter: prints each decoded event as a small block on stdout.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from backend_eventwatch.eventwatch_logging import get_logger

if TYPE_CHECKING:
    from backend_eventwatch.event_listener.models import DecodedEvent

logger = get_logger(__name__)


def format_event(event: DecodedEvent) -> str:
    header = "======= Event =======" if event.is_previous else "===== Event Detected ====="
    return "\n".join(
        [
            "",
            header,
            f"Transaction: {event.transaction_hash}",
            f"Block: {event.block_number}",
            f"Sender: {event.sender}",
            f"New Value: {event.value}",
            "==========================",
            "",
        ]
    )


def display_information(event: DecodedEvent, file: TextIO | None = None) -> None:
    """Print the event for the operator and log it for aggregation."""
    print(format_event(event), file=file or sys.stdout, flush=True)
    logger.info(
        "event_reported",
        tx_hash=event.transaction_hash,
        block_number=event.block_number,
        sender=event.sender,
        value=event.value,
        previous=event.is_previous,
    )

"""
Tests for the console reporter.
"""

from __future__ import annotations

import io

from backend_eventwatch.event_listener import DecodedEvent
from backend_eventwatch.reporter import display_information, format_event

EVENT = DecodedEvent(
    transaction_hash="0x" + "ab" * 32,
    block_number=1000,
    sender="0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    value=42,
)


def test_live_event_block():
    text = format_event(EVENT)
    assert "===== Event Detected =====" in text
    assert "Transaction: 0x" + "ab" * 32 in text
    assert "Block: 1000" in text
    assert "Sender: 0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed" in text
    assert "New Value: 42" in text


def test_previous_event_header():
    previous = DecodedEvent(EVENT.transaction_hash, 7, EVENT.sender, 1, is_previous=True)
    assert "======= Event =======" in format_event(previous)
    assert "Detected" not in format_event(previous)


def test_display_writes_to_stream():
    out = io.StringIO()
    display_information(EVENT, file=out)
    assert "Block: 1000" in out.getvalue()

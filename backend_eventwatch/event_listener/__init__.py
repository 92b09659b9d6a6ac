"""
Contract event listener package.

Subscribes to NumberUpdatedEvent logs over the node client's WebSocket
session, decodes each log into a DecodedEvent and forwards it to the
reporter, reconnecting after faults, stream closure and stalls.
"""

from backend_eventwatch.event_listener.listener import (
    EventListener,
    ListenerState,
    SessionEnd,
    build_event_filter,
)
from backend_eventwatch.event_listener.models import DecodedEvent, EventFilter, RawLog
from backend_eventwatch.event_listener.processor import ZERO_ADDRESS, process_log

__all__ = [
    "DecodedEvent",
    "EventFilter",
    "EventListener",
    "ListenerState",
    "RawLog",
    "SessionEnd",
    "ZERO_ADDRESS",
    "build_event_filter",
    "process_log",
]

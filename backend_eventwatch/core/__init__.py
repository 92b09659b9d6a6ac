"""
Core utilities: exceptions shared by the node client, contract interface
and event listener.
"""

from backend_eventwatch.core.exceptions import (
    ConfigError,
    ConnectionExhaustedError,
    ContractCallError,
    EventListenerError,
    EventWatchError,
    MalformedLogError,
    NotConnectedError,
    RpcError,
    RpcProtocolError,
    SubscriptionError,
    TransactionNotFoundError,
)

__all__ = [
    "ConfigError",
    "ConnectionExhaustedError",
    "ContractCallError",
    "EventListenerError",
    "EventWatchError",
    "MalformedLogError",
    "NotConnectedError",
    "RpcError",
    "RpcProtocolError",
    "SubscriptionError",
    "TransactionNotFoundError",
]

# Node client: WebSocket JSON-RPC session and the connection manager around it.

from backend_eventwatch.node_client.client import (
    ConnectionState,
    NodeClient,
    RetryState,
)
from backend_eventwatch.node_client.session import LogSubscription, RpcSession

__all__ = [
    "ConnectionState",
    "LogSubscription",
    "NodeClient",
    "RetryState",
    "RpcSession",
]

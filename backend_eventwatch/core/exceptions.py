"""
Application-level exceptions.

Two families: fatal conditions the entry point turns into a non-zero exit
(ConfigError, ConnectionExhaustedError), and EventListenerError subclasses
the event listener converts into a reconnect.
"""

from __future__ import annotations

from typing import Any


class EventWatchError(Exception):
    """Base class for all watcher errors."""


class ConfigError(EventWatchError, ValueError):
    """Required setting missing or malformed."""


class ConnectionExhaustedError(EventWatchError):
    """Every connect attempt against the node failed; not retried further."""

    def __init__(self, node_url: str, attempts: int) -> None:
        super().__init__(f"Failed to connect to {node_url} after {attempts} attempts")
        self.node_url = node_url
        self.attempts = attempts


class NotConnectedError(EventWatchError):
    """Connection handle requested before any successful connect."""


class EventListenerError(EventWatchError):
    """Recoverable fault inside one subscription session."""


class SubscriptionError(EventListenerError):
    """Opening the log subscription failed."""


class RpcError(EventListenerError):
    """Node answered a JSON-RPC request with an error object."""

    def __init__(self, method: str, error: Any) -> None:
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message") or str(error)
        else:
            code = None
            message = str(error)
        super().__init__(f"{method} failed: {message} (code={code})")
        self.method = method
        self.code = code
        self.rpc_message = message


class RpcProtocolError(EventListenerError):
    """Frame from the node could not be parsed as JSON-RPC."""


class MalformedLogError(EventListenerError):
    """Log entry is missing required fields or carries undecodable values."""


class TransactionNotFoundError(EventListenerError):
    """Node has no transaction for a hash taken from a delivered log."""


class ContractCallError(EventListenerError):
    """eth_call returned data that does not decode against the ABI."""

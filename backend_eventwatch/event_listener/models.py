"""
Data models for event listener input and output.

Responsibilities:
- EventFilter: server-side subscription criterion (address + topics).
- RawLog: untrusted log entry as delivered by eth_subscribe / eth_getLogs.
- DecodedEvent: the record handed to the reporter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from eth_utils import decode_hex, encode_hex

from backend_eventwatch.core.exceptions import MalformedLogError


@dataclass(frozen=True)
class EventFilter:
    """
    Address + topic criterion the node applies before delivering logs.

    Built once per process and reused across reconnects.
    """

    address: str
    topics: tuple[bytes, ...]

    def to_params(self) -> dict[str, Any]:
        """Filter object for eth_subscribe("logs", ...)."""
        return {
            "address": self.address,
            "topics": [encode_hex(t) for t in self.topics],
        }

    def with_block_range(self, from_block: int, to_block: int | None = None) -> dict[str, Any]:
        """Filter object for eth_getLogs; to_block None means latest."""
        params = self.to_params()
        params["fromBlock"] = hex(from_block)
        params["toBlock"] = hex(to_block) if to_block is not None else "latest"
        return params


def _parse_quantity(value: Any, name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value, 16)
    except (TypeError, ValueError):
        raise MalformedLogError(f"Log field {name} is not a hex quantity: {value!r}") from None


def _parse_data(value: Any, name: str) -> bytes:
    try:
        return decode_hex(value)
    except (TypeError, ValueError):
        raise MalformedLogError(f"Log field {name} is not hex data: {value!r}") from None


@dataclass(frozen=True)
class RawLog:
    """
    Log entry from the node. Transaction hash and block number may be None
    here; process_log rejects such entries.
    """

    address: str | None
    transaction_hash: str | None
    block_number: int | None
    topics: tuple[bytes, ...]
    data: bytes = b""
    log_index: int | None = None
    removed: bool = False

    @classmethod
    def from_rpc_item(cls, item: Any) -> "RawLog":
        """Build from one log object of an eth_subscription notification or eth_getLogs result."""
        if not isinstance(item, dict):
            raise MalformedLogError(f"Log entry must be an object, got {type(item).__name__}")
        raw_topics = item.get("topics") or []
        if not isinstance(raw_topics, list):
            raise MalformedLogError("Log field topics must be a list")
        tx_hash = item.get("transactionHash")
        if tx_hash is not None and not isinstance(tx_hash, str):
            raise MalformedLogError(f"Log field transactionHash is not a string: {tx_hash!r}")
        return cls(
            address=item.get("address"),
            transaction_hash=tx_hash,
            block_number=_parse_quantity(item.get("blockNumber"), "blockNumber"),
            topics=tuple(_parse_data(t, "topics") for t in raw_topics),
            data=_parse_data(item.get("data") or "0x", "data"),
            log_index=_parse_quantity(item.get("logIndex"), "logIndex"),
            removed=bool(item.get("removed", False)),
        )


@dataclass(frozen=True)
class DecodedEvent:
    """One NumberUpdatedEvent with the contract value read at its block."""

    transaction_hash: str
    block_number: int
    sender: str
    value: int
    is_previous: bool = field(default=False, compare=False)

"""
Turn one RawLog into a DecodedEvent.

Account resolution prefers the first indexed topic (no network access) and
falls back to the transaction's sender. The contract value is read at the
log's own block so it matches the state the event was emitted in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eth_utils import to_checksum_address

from backend_eventwatch.contract.binding import ContractBinding
from backend_eventwatch.core.exceptions import MalformedLogError, TransactionNotFoundError
from backend_eventwatch.event_listener.models import DecodedEvent, RawLog
from backend_eventwatch.eventwatch_logging import get_logger

if TYPE_CHECKING:
    from backend_eventwatch.node_client.session import RpcSession

logger = get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
_TOPIC_SIZE = 32


def account_from_topic(topic: bytes) -> str:
    """Low-order 20 bytes of a 32-byte topic as a checksum address."""
    if len(topic) != _TOPIC_SIZE:
        raise MalformedLogError(f"Topic must be {_TOPIC_SIZE} bytes, got {len(topic)}")
    return to_checksum_address(topic[12:])


async def resolve_sender(session: "RpcSession", log: RawLog) -> str:
    if len(log.topics) > 1:
        return account_from_topic(log.topics[1])
    tx = await session.request("eth_getTransactionByHash", [log.transaction_hash])
    if tx is None:
        raise TransactionNotFoundError(f"Transaction should exist: {log.transaction_hash}")
    sender = tx.get("from") if isinstance(tx, dict) else None
    if not sender:
        logger.debug("event_sender_missing", tx_hash=log.transaction_hash)
        return ZERO_ADDRESS
    return to_checksum_address(sender)


async def process_log(
    session: "RpcSession",
    contract: ContractBinding,
    log: RawLog,
    *,
    is_previous: bool = False,
) -> DecodedEvent:
    """
    Decode one log and read the contract value at its block.

    Raises:
        MalformedLogError: transaction hash or block number missing, or a
            topic that is not 32 bytes.
        TransactionNotFoundError: fallback lookup found no transaction.
    """
    if not log.transaction_hash:
        raise MalformedLogError("Log should have transaction hash")
    if log.block_number is None:
        raise MalformedLogError("Log should have block number")

    sender = await resolve_sender(session, log)
    value = await contract.retrieve(block_number=log.block_number)
    return DecodedEvent(
        transaction_hash=log.transaction_hash,
        block_number=log.block_number,
        sender=sender,
        value=value,
        is_previous=is_previous,
    )

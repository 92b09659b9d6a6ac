"""
Contract binding: read-only calls against the watched contract over the
current node session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex

from backend_eventwatch.contract.abi import CONTRACT_ABI, ContractAbi
from backend_eventwatch.core.exceptions import ContractCallError
from backend_eventwatch.eventwatch_logging import get_logger

if TYPE_CHECKING:
    from backend_eventwatch.node_client.session import RpcSession

logger = get_logger(__name__)


def block_tag(block_number: int | None) -> str:
    """JSON-RPC block parameter: hex quantity, or 'latest' when None."""
    if block_number is None:
        return "latest"
    return hex(block_number)


class ContractBinding:
    """
    Contract address + ABI bound to one session. Cheap to build; rebuilt for
    every subscription attempt so it never outlives its session.
    """

    def __init__(
        self,
        session: "RpcSession",
        address: str,
        abi: ContractAbi = CONTRACT_ABI,
    ) -> None:
        self.session = session
        self.address = address
        self.abi = abi

    async def call(
        self,
        name: str,
        args: Sequence[Any] = (),
        *,
        block_number: int | None = None,
    ) -> tuple[Any, ...]:
        """eth_call the function at the given block and decode its outputs."""
        tx = {"to": self.address, "data": encode_hex(self.abi.encode_call(name, args))}
        tag = block_tag(block_number)
        result = await self.session.request("eth_call", [tx, tag])
        try:
            data = decode_hex(result)
        except (TypeError, ValueError):
            raise ContractCallError(f"{name}() returned non-hex data: {result!r}") from None
        if not data:
            raise ContractCallError(
                f"{name}() returned no data at block {tag}; is the contract deployed there?"
            )
        try:
            return self.abi.decode_output(name, data)
        except DecodingError as e:
            raise ContractCallError(f"{name}() output does not decode: {e}") from e

    async def retrieve(self, block_number: int | None = None) -> int:
        """Current stored number, pinned to block_number when given."""
        (value,) = await self.call("retrieve", block_number=block_number)
        logger.debug("contract_retrieve", block=block_tag(block_number), value=value)
        return int(value)


def get_contract(session: "RpcSession", address: str) -> ContractBinding:
    """Bind the watched contract's ABI to the given session."""
    return ContractBinding(session, address)

# Contract interface: static ABI, selectors/topics, eth_call binding.

from backend_eventwatch.contract.abi import (
    CONTRACT_ABI,
    NUMBER_UPDATED_EVENT,
    ContractAbi,
)
from backend_eventwatch.contract.binding import ContractBinding, block_tag, get_contract

__all__ = [
    "CONTRACT_ABI",
    "NUMBER_UPDATED_EVENT",
    "ContractAbi",
    "ContractBinding",
    "block_tag",
    "get_contract",
]

"""
Static interface of the watched contract and ABI helpers.

The contract emits NumberUpdatedEvent(address Sender) and exposes
retrieve() -> uint256 and store(uint256). Signatures, selectors and topics
are derived from the JSON ABI so they cannot drift from it.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from eth_abi import decode, encode
from eth_utils import keccak

NUMBER_UPDATED_EVENT = "NumberUpdatedEvent"

CONTRACT_ABI_JSON = """[
    {
        "anonymous": false,
        "inputs": [
            {
                "indexed": false,
                "internalType": "address",
                "name": "Sender",
                "type": "address"
            }
        ],
        "name": "NumberUpdatedEvent",
        "type": "event"
    },
    {
        "inputs": [],
        "name": "retrieve",
        "outputs": [
            {
                "internalType": "uint256",
                "name": "",
                "type": "uint256"
            }
        ],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            {
                "internalType": "uint256",
                "name": "num",
                "type": "uint256"
            }
        ],
        "name": "store",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]"""


class ContractAbi:
    """Lookup and encoding over a parsed JSON ABI."""

    def __init__(self, abi: list[dict[str, Any]]) -> None:
        self._entries: dict[tuple[str, str], dict[str, Any]] = {}
        for entry in abi:
            kind = entry.get("type", "function")
            name = entry.get("name")
            if name:
                self._entries[(kind, name)] = entry

    @classmethod
    def from_json(cls, raw: str) -> "ContractAbi":
        return cls(json.loads(raw))

    def _entry(self, kind: str, name: str) -> dict[str, Any]:
        try:
            return self._entries[(kind, name)]
        except KeyError:
            raise KeyError(f"ABI has no {kind} named {name!r}") from None

    @staticmethod
    def _types(params: Sequence[dict[str, Any]]) -> list[str]:
        return [p["type"] for p in params]

    def signature(self, name: str, kind: str = "function") -> str:
        """Canonical signature, e.g. 'store(uint256)'."""
        entry = self._entry(kind, name)
        return f"{name}({','.join(self._types(entry.get('inputs', [])))})"

    def selector(self, name: str) -> bytes:
        """First 4 bytes of keccak-256 of the function signature."""
        return keccak(text=self.signature(name))[:4]

    def event_topic(self, name: str) -> bytes:
        """topic0 of the event: keccak-256 of its signature."""
        return keccak(text=self.signature(name, kind="event"))

    def encode_call(self, name: str, args: Sequence[Any] = ()) -> bytes:
        """Selector followed by the ABI-encoded arguments."""
        types = self._types(self._entry("function", name).get("inputs", []))
        if len(types) != len(args):
            raise ValueError(f"{name} takes {len(types)} arguments, got {len(args)}")
        return self.selector(name) + encode(types, list(args))

    def decode_output(self, name: str, data: bytes) -> tuple[Any, ...]:
        types = self._types(self._entry("function", name).get("outputs", []))
        return tuple(decode(types, data))


CONTRACT_ABI = ContractAbi.from_json(CONTRACT_ABI_JSON)

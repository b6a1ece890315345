"""Records emitted by successful pool operations.

Records are observable side effects only; the engine never reads them back.
Asset order in a record follows the caller's argument order.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, unique
from typing import Any, Dict, Union

from ..state.types import Address, Amount


@unique
class Event(Enum):
    ADD_LIQUIDITY = "AddLiquidity"
    REMOVE_LIQUIDITY = "RemoveLiquidity"
    SWAP = "Swap"
    CLAIM_TRANSFER = "ClaimTransfer"


@dataclass(frozen=True)
class AddLiquidity:
    caller: Address
    token_a: Address
    token_b: Address
    amount_a: Amount
    amount_b: Amount
    minted_claims: Amount
    event: Event = Event.ADD_LIQUIDITY

    def to_dict(self) -> Dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class RemoveLiquidity:
    caller: Address
    token_a: Address
    token_b: Address
    amount_a: Amount
    amount_b: Amount
    burned_claims: Amount
    event: Event = Event.REMOVE_LIQUIDITY

    def to_dict(self) -> Dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class Swap:
    caller: Address
    token_in: Address
    token_out: Address
    amount_in: Amount
    amount_out: Amount
    event: Event = Event.SWAP

    def to_dict(self) -> Dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class ClaimTransfer:
    sender: Address
    recipient: Address
    amount: Amount
    event: Event = Event.CLAIM_TRANSFER

    def to_dict(self) -> Dict[str, Any]:
        return _as_dict(self)


Record = Union[AddLiquidity, RemoveLiquidity, Swap, ClaimTransfer]


def _as_dict(record: Record) -> Dict[str, Any]:
    out = asdict(record)
    out["event"] = record.event.value
    return out

"""
Asset transfer collaborators.

The pool never moves asset balances itself; it calls an `AssetTransfer` handle
bound to the pool's own account (the implicit sender of `transfer` and the
spender of `transfer_from`). A `False` return is a failed transfer.

`InMemoryAsset` is a reference fungible asset with balances and allowances. It
supports checkpoint/rollback so a pool transaction can undo asset movements
together with its own state, and post-transfer hooks so callers can observe (or
attempt to re-enter from) a transfer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Protocol, Tuple, runtime_checkable

import structlog

from ..state.types import Address, Amount, require_address


logger = structlog.get_logger()

TransferHook = Callable[["InMemoryAsset", Address, Address, Amount], None]


@runtime_checkable
class AssetTransfer(Protocol):
    def transfer(self, to: Address, amount: Amount) -> bool: ...

    def transfer_from(self, from_: Address, to: Address, amount: Amount) -> bool: ...


@runtime_checkable
class Checkpointable(Protocol):
    def checkpoint(self) -> object: ...

    def rollback(self, checkpoint: object) -> None: ...


@dataclass(frozen=True)
class AssetCheckpoint:
    balances: Tuple[Tuple[Address, Amount], ...]
    allowances: Tuple[Tuple[Tuple[Address, Address], Amount], ...]


class InMemoryAsset:
    """
    Fungible asset ledger: holder -> balance, (owner, spender) -> allowance.

    Transfers never raise for ordinary failures (insufficient balance or
    allowance); they return False like a well-behaved token.
    """

    def __init__(self, address: Address, *, symbol: str = "") -> None:
        self.address = require_address(address, name="address")
        self.symbol = symbol or self.address[:10]
        self._balances: Dict[Address, Amount] = {}
        self._allowances: Dict[Tuple[Address, Address], Amount] = {}
        self.hooks: List[TransferHook] = []

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder.lower(), 0)

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((owner.lower(), spender.lower()), 0)

    def total_supply(self) -> Amount:
        return sum(self._balances.values())

    def mint(self, to: Address, amount: Amount) -> None:
        to = require_address(to, name="to")
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        self._set_balance(to, self.balance_of(to) + amount)

    def approve(self, owner: Address, spender: Address, amount: Amount) -> None:
        owner = require_address(owner, name="owner")
        spender = require_address(spender, name="spender")
        if amount < 0:
            raise ValueError(f"allowance must be non-negative: {amount}")
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount

    def transfer_as(self, sender: Address, to: Address, amount: Amount) -> bool:
        """Move `amount` from `sender` to `to`. Returns False on insufficient balance."""
        sender, to = sender.lower(), to.lower()
        if amount < 0 or self.balance_of(sender) < amount:
            logger.debug("asset_transfer_rejected", asset=self.symbol, sender=sender, to=to, amount=amount)
            return False
        self._set_balance(sender, self.balance_of(sender) - amount)
        self._set_balance(to, self.balance_of(to) + amount)
        for hook in list(self.hooks):
            hook(self, sender, to, amount)
        return True

    def transfer_from_as(self, spender: Address, from_: Address, to: Address, amount: Amount) -> bool:
        """Spend `from_`'s allowance granted to `spender`. Returns False when it does not cover `amount`."""
        spender, from_ = spender.lower(), from_.lower()
        allowed = self.allowance(from_, spender)
        if spender != from_ and allowed < amount:
            logger.debug("asset_allowance_rejected", asset=self.symbol, owner=from_, spender=spender, amount=amount)
            return False
        if amount < 0 or self.balance_of(from_) < amount:
            logger.debug("asset_transfer_rejected", asset=self.symbol, sender=from_, to=to, amount=amount)
            return False
        if spender != from_:
            self.approve(from_, spender, allowed - amount)
        return self.transfer_as(from_, to, amount)

    def handle(self, account: Address) -> "AssetHandle":
        """Return an `AssetTransfer` whose implicit sender is `account`."""
        return AssetHandle(asset=self, account=require_address(account, name="account"))

    def checkpoint(self) -> AssetCheckpoint:
        return AssetCheckpoint(
            balances=tuple(self._balances.items()),
            allowances=tuple(self._allowances.items()),
        )

    def rollback(self, checkpoint: object) -> None:
        if not isinstance(checkpoint, AssetCheckpoint):
            raise TypeError("checkpoint must be an AssetCheckpoint")
        self._balances = dict(checkpoint.balances)
        self._allowances = dict(checkpoint.allowances)

    def _set_balance(self, holder: Address, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def __repr__(self) -> str:
        return f"InMemoryAsset({self.symbol}, {len(self._balances)} holders)"


@dataclass(frozen=True)
class AssetHandle:
    """`AssetTransfer` view of an `InMemoryAsset` bound to one account."""

    asset: InMemoryAsset
    account: Address

    @property
    def address(self) -> Address:
        return self.asset.address

    def transfer(self, to: Address, amount: Amount) -> bool:
        return self.asset.transfer_as(self.account, to, amount)

    def transfer_from(self, from_: Address, to: Address, amount: Amount) -> bool:
        return self.asset.transfer_from_as(self.account, from_, to, amount)

    def checkpoint(self) -> AssetCheckpoint:
        return self.asset.checkpoint()

    def rollback(self, checkpoint: object) -> None:
        self.asset.rollback(checkpoint)

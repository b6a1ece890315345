"""
Pool: the single reserve pair, its claim table, and the transaction boundary.

A `Pool` value is passed explicitly into every operation in `liquidity.py`,
`swap.py` and `oracle.py`. Mutating operations run inside `Pool.transaction()`:

- entry is refused with `ReentrantCall` while another mutating operation on the
  same pool is in flight (asset transfers are untrusted and may call back),
- the ledger, claim table, pair binding, record log and every checkpointable
  asset collaborator are checkpointed on entry,
- invariants are checked before the operation is allowed to complete,
- any exception restores every checkpoint before propagating to the caller.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

import structlog

from ..config import PoolConfig
from ..errors import (
    Expired,
    IdenticalAssets,
    InvalidAssetPair,
    InvariantViolation,
    PoolError,
    ReentrantCall,
    TransferFailed,
    ZeroRecipient,
)
from ..integration.assets import AssetTransfer, Checkpointable
from ..state.claims import ClaimTable
from ..state.ledger import LedgerState, ReserveLedger
from ..state.types import Address, Amount, Side, is_null_address, require_address
from .invariants import check_all
from .records import Record


logger = structlog.get_logger()


def _now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class _Checkpoint:
    ledger: LedgerState
    claims: Dict[Address, Amount]
    pair: Tuple[Optional[Address], Optional[Address]]
    records_len: int
    assets: Tuple[Tuple[Checkpointable, object], ...]


class Pool:
    """
    One constant-product pool instance.

    Attributes:
        address: The pool's own account (sender of payouts, recipient of deposits)
        assets: Asset address -> transfer collaborator bound to `address`
        config: Engine settings (price scale, reserve width)
        clock: Returns the current unix time in seconds; compared with deadlines
        ledger: Reserves and total claim supply
        claims: Claim balances per holder
        token_a, token_b: The bound pair (None until the first deposit)
        records: Emitted records, oldest first
    """

    def __init__(
        self,
        *,
        address: Address,
        assets: Optional[Mapping[Address, AssetTransfer]] = None,
        config: PoolConfig = PoolConfig(),
        clock: Callable[[], int] = _now,
    ) -> None:
        self.address = require_address(address, name="address")
        self.config = config
        self.clock = clock
        self.assets: Dict[Address, AssetTransfer] = {}
        for token, asset in (assets or {}).items():
            self.register_asset(token, asset)
        self.ledger = ReserveLedger(max_reserve=config.max_reserve)
        self.claims = ClaimTable()
        self.token_a: Optional[Address] = None
        self.token_b: Optional[Address] = None
        self.records: List[Record] = []
        self._in_flight: Optional[str] = None

    # -- pair binding --------------------------------------------------------

    def register_asset(self, token: Address, asset: AssetTransfer) -> None:
        if not isinstance(asset, AssetTransfer):
            raise TypeError("asset must implement transfer() and transfer_from()")
        self.assets[require_address(token, name="token")] = asset

    def is_bound(self) -> bool:
        return self.token_a is not None and self.token_b is not None

    def is_empty(self) -> bool:
        return self.ledger.state.is_empty()

    def bind_pair(self, token_a: Address, token_b: Address) -> None:
        """Bind the pair on the first deposit. Binding is permanent."""
        if self.is_bound():
            raise InvalidAssetPair("pool pair is already bound")
        if token_a == token_b:
            raise IdenticalAssets(f"token_a == token_b: {token_a}")
        self.token_a, self.token_b = token_a, token_b
        logger.info("pool_pair_bound", pool=self.address, token_a=token_a, token_b=token_b)

    def orientation(self, token_a: Address, token_b: Address) -> Side:
        """
        Side of the bound pair that `token_a` occupies.

        Side.A when (token_a, token_b) matches the bound order, Side.B when it is
        reversed.

        Raises:
            InvalidAssetPair: If the pool is unbound or the pair does not match
        """
        if not self.is_bound():
            raise InvalidAssetPair("pool has no bound pair")
        if (token_a, token_b) == (self.token_a, self.token_b):
            return Side.A
        if (token_a, token_b) == (self.token_b, self.token_a):
            return Side.B
        raise InvalidAssetPair(f"({token_a}, {token_b}) is not the bound pair ({self.token_a}, {self.token_b})")

    def token(self, side: Side) -> Address:
        token = self.token_a if side is Side.A else self.token_b
        if token is None:
            raise InvalidAssetPair("pool has no bound pair")
        return token

    def reserves_for(self, side: Side) -> Tuple[Amount, Amount]:
        """(reserve of `side`, reserve of the other side)."""
        state = self.ledger.state
        return state.reserve(side), state.reserve(side.other())

    # -- entry checks --------------------------------------------------------

    def check_deadline(self, deadline: int) -> None:
        if not isinstance(deadline, int) or isinstance(deadline, bool):
            raise TypeError("deadline must be an int")
        now = self.clock()
        if now > deadline:
            raise Expired(f"deadline {deadline} passed (now={now})")

    @staticmethod
    def check_recipient(recipient: Address) -> Address:
        recipient = require_address(recipient, name="recipient")
        if is_null_address(recipient):
            raise ZeroRecipient("recipient is the null address")
        return recipient

    # -- asset movement ------------------------------------------------------

    def asset(self, token: Address) -> AssetTransfer:
        try:
            return self.assets[token]
        except KeyError:
            raise InvalidAssetPair(f"no transfer collaborator registered for {token}") from None

    def pull(self, token: Address, from_: Address, amount: Amount) -> None:
        """Move `amount` of `token` from `from_` into the pool."""
        asset = self.asset(token)
        try:
            ok = asset.transfer_from(from_, self.address, amount)
        except Exception as exc:
            raise TransferFailed(f"transfer_from({from_}, pool, {amount}) raised on {token}: {exc}") from exc
        if ok is not True:
            raise TransferFailed(f"transfer_from({from_}, pool, {amount}) failed on {token}")

    def push(self, token: Address, to: Address, amount: Amount) -> None:
        """Move `amount` of `token` out of the pool to `to`."""
        asset = self.asset(token)
        try:
            ok = asset.transfer(to, amount)
        except Exception as exc:
            raise TransferFailed(f"transfer({to}, {amount}) raised on {token}: {exc}") from exc
        if ok is not True:
            raise TransferFailed(f"transfer({to}, {amount}) failed on {token}")

    # -- records -------------------------------------------------------------

    def emit(self, record: Record) -> None:
        self.records.append(record)
        fields = record.to_dict()
        event = fields.pop("event")
        logger.info(event, pool=self.address, **fields)

    # -- transaction boundary ------------------------------------------------

    @contextmanager
    def transaction(self, operation: str) -> Iterator["Pool"]:
        if self._in_flight is not None:
            raise ReentrantCall(f"{operation} called while {self._in_flight} is in flight")
        self._in_flight = operation
        checkpoint = self._checkpoint()
        try:
            yield self
            violations = check_all(self)
            if violations:
                raise InvariantViolation(violations)
        except Exception as exc:
            self._rollback(checkpoint)
            logger.warning(
                "pool_operation_rejected",
                pool=self.address,
                operation=operation,
                code=exc.code if isinstance(exc, PoolError) else type(exc).__name__,
                error=str(exc),
            )
            raise
        finally:
            self._in_flight = None

    def _checkpoint(self) -> _Checkpoint:
        seen: set[int] = set()
        assets = []
        for asset in self.assets.values():
            if isinstance(asset, Checkpointable) and id(asset) not in seen:
                seen.add(id(asset))
                assets.append((asset, asset.checkpoint()))
        return _Checkpoint(
            ledger=self.ledger.snapshot(),
            claims=self.claims.get_all_balances(),
            pair=(self.token_a, self.token_b),
            records_len=len(self.records),
            assets=tuple(assets),
        )

    def _rollback(self, checkpoint: _Checkpoint) -> None:
        self.ledger.restore(checkpoint.ledger)
        self.claims.load(checkpoint.claims)
        self.token_a, self.token_b = checkpoint.pair
        del self.records[checkpoint.records_len:]
        for asset, asset_checkpoint in checkpoint.assets:
            asset.rollback(asset_checkpoint)

    def __repr__(self) -> str:
        reserve_a, reserve_b, supply = self.ledger.get()
        return (
            f"Pool(address={self.address[:10]}..., pair=({self.token_a}, {self.token_b}), "
            f"reserves=({reserve_a}, {reserve_b}), total_supply={supply})"
        )

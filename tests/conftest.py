# [TESTER] v1

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import pytest

from pairswap.core import Pool, add_liquidity, remove_liquidity, swap_exact_in
from pairswap.integration import InMemoryAsset


POOL = "0x" + "99" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20
TOKEN_C = "0x" + "33" * 20
NOW = 1_700_000_000
FUNDING = 10**30


@dataclass
class PoolEnv:
    """A pool wired to two funded in-memory assets and a settable clock."""

    POOL = POOL
    ALICE = ALICE
    BOB = BOB
    TOKEN_A = TOKEN_A
    TOKEN_B = TOKEN_B
    TOKEN_C = TOKEN_C

    asset_a: InMemoryAsset
    asset_b: InMemoryAsset
    now: int = NOW
    pool: Pool = field(init=False)

    def __post_init__(self) -> None:
        self.pool = Pool(
            address=POOL,
            assets={TOKEN_A: self.asset_a.handle(POOL), TOKEN_B: self.asset_b.handle(POOL)},
            clock=lambda: self.now,
        )

    @property
    def deadline(self) -> int:
        return self.now + 60

    def deposit(
        self,
        amount_a: int,
        amount_b: int,
        *,
        caller: str = ALICE,
        recipient: str | None = None,
        amount_a_min: int = 0,
        amount_b_min: int = 0,
    ) -> Tuple[int, int, int]:
        return add_liquidity(
            self.pool,
            caller=caller,
            token_a=TOKEN_A,
            token_b=TOKEN_B,
            amount_a_desired=amount_a,
            amount_b_desired=amount_b,
            amount_a_min=amount_a_min,
            amount_b_min=amount_b_min,
            recipient=recipient or caller,
            deadline=self.deadline,
        )

    def withdraw(self, claims: int, *, caller: str = ALICE, recipient: str | None = None) -> Tuple[int, int]:
        return remove_liquidity(
            self.pool,
            caller=caller,
            token_a=TOKEN_A,
            token_b=TOKEN_B,
            claim_amount=claims,
            amount_a_min=0,
            amount_b_min=0,
            recipient=recipient or caller,
            deadline=self.deadline,
        )

    def sell_a(self, amount_in: int, *, caller: str = BOB, amount_out_min: int = 0) -> int:
        return swap_exact_in(
            self.pool,
            caller=caller,
            amount_in=amount_in,
            amount_out_min=amount_out_min,
            token_in=TOKEN_A,
            token_out=TOKEN_B,
            recipient=caller,
            deadline=self.deadline,
        )

    def balances(self, holder: str) -> Tuple[int, int]:
        return self.asset_a.balance_of(holder), self.asset_b.balance_of(holder)


def funded_assets() -> Tuple[InMemoryAsset, InMemoryAsset]:
    asset_a = InMemoryAsset(TOKEN_A, symbol="A")
    asset_b = InMemoryAsset(TOKEN_B, symbol="B")
    for asset in (asset_a, asset_b):
        for holder in (ALICE, BOB):
            asset.mint(holder, FUNDING)
            asset.approve(holder, POOL, FUNDING)
    return asset_a, asset_b


@pytest.fixture
def env() -> PoolEnv:
    asset_a, asset_b = funded_assets()
    return PoolEnv(asset_a=asset_a, asset_b=asset_b)

# [TESTER] v1

from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from pairswap.core import (
    AddLiquidity,
    ClaimTransfer,
    Pool,
    RemoveLiquidity,
    add_liquidity,
    check_all,
    claim_balance_of,
    quote,
    remove_liquidity,
    total_claim_supply,
    transfer_claims,
)
from pairswap.errors import (
    IdenticalAssets,
    InsufficientAAmount,
    InsufficientBalance,
    InsufficientBAmount,
    InsufficientLiquidityMinted,
    InvalidAssetPair,
    PoolError,
    ZeroRecipient,
)
from pairswap.integration import InMemoryAsset
from pairswap.state import NULL_ADDRESS


def _add_reversed(env, amount_b: int, amount_a: int, *, min_b: int = 0, min_a: int = 0):
    """Deposit with the pair passed as (TOKEN_B, TOKEN_A)."""
    return add_liquidity(
        env.pool,
        caller=env.ALICE,
        token_a=env.TOKEN_B,
        token_b=env.TOKEN_A,
        amount_a_desired=amount_b,
        amount_b_desired=amount_a,
        amount_a_min=min_b,
        amount_b_min=min_a,
        recipient=env.ALICE,
        deadline=env.deadline,
    )


class TestAddLiquidity:
    def test_first_deposit_binds_pair_and_mints_geometric_mean(self, env) -> None:
        assert env.deposit(100, 400) == (100, 400, 200)

        pool = env.pool
        assert (pool.token_a, pool.token_b) == (env.TOKEN_A, env.TOKEN_B)
        assert pool.ledger.get() == (100, 400, 200)
        assert claim_balance_of(pool, env.ALICE) == 200
        assert total_claim_supply(pool) == 200
        assert env.balances(env.POOL) == (100, 400)
        assert pool.records == [
            AddLiquidity(
                caller=env.ALICE,
                token_a=env.TOKEN_A,
                token_b=env.TOKEN_B,
                amount_a=100,
                amount_b=400,
                minted_claims=200,
            )
        ]

    def test_later_deposit_is_trimmed_to_reserve_ratio(self, env) -> None:
        env.deposit(100, 400)
        assert env.deposit(50, 1000, caller=env.BOB) == (50, 200, 100)
        assert env.pool.ledger.get() == (150, 600, 300)
        assert claim_balance_of(env.pool, env.BOB) == 100
        # Only the used amounts leave the caller.
        assert env.balances(env.BOB) == (10**30 - 50, 10**30 - 200)

    def test_recipient_receives_claims(self, env) -> None:
        env.deposit(100, 400, recipient=env.BOB)
        assert claim_balance_of(env.pool, env.BOB) == 200
        assert claim_balance_of(env.pool, env.ALICE) == 0

    def test_reversed_pair_order_reports_caller_order(self, env) -> None:
        env.deposit(100, 400)
        amount_b, amount_a, minted = _add_reversed(env, 1000, 50)
        assert (amount_b, amount_a, minted) == (200, 50, 100)
        assert env.pool.ledger.get() == (150, 600, 300)

        record = env.pool.records[-1]
        assert (record.token_a, record.token_b) == (env.TOKEN_B, env.TOKEN_A)
        assert (record.amount_a, record.amount_b) == (200, 50)

    def test_reversed_pair_slippage_names_the_callers_side(self, env) -> None:
        env.deposit(100, 400)
        # The caller's token_a is TOKEN_B here; its guard trips.
        with pytest.raises(InsufficientAAmount):
            _add_reversed(env, 1000, 50, min_b=201)
        with pytest.raises(InsufficientBAmount):
            _add_reversed(env, 100, 50, min_a=26)
        assert env.pool.ledger.get() == (100, 400, 200)

    def test_slippage_guard_rejects_without_state_change(self, env) -> None:
        env.deposit(100, 400)
        with pytest.raises(InsufficientBAmount):
            env.deposit(50, 1000, amount_b_min=201)
        with pytest.raises(InsufficientAAmount):
            env.deposit(50, 100, amount_a_min=26)
        assert env.pool.ledger.get() == (100, 400, 200)
        assert len(env.pool.records) == 1

    def test_zero_mint_first_deposit_leaves_pool_unbound(self, env) -> None:
        with pytest.raises(InsufficientLiquidityMinted):
            env.deposit(1000, 0)
        assert not env.pool.is_bound()
        assert env.pool.ledger.get() == (0, 0, 0)
        assert env.balances(env.POOL) == (0, 0)

    def test_dust_deposit_rejected(self, env) -> None:
        env.deposit(10**6, 10**6)
        with pytest.raises(InsufficientLiquidityMinted):
            env.deposit(1, 0)

    def test_mismatched_pair_rejected(self, env) -> None:
        env.deposit(100, 400)
        with pytest.raises(InvalidAssetPair):
            add_liquidity(
                env.pool,
                caller=env.ALICE,
                token_a=env.TOKEN_A,
                token_b=env.TOKEN_C,
                amount_a_desired=10,
                amount_b_desired=10,
                amount_a_min=0,
                amount_b_min=0,
                recipient=env.ALICE,
                deadline=env.deadline,
            )

    def test_identical_assets_rejected(self, env) -> None:
        with pytest.raises(IdenticalAssets):
            add_liquidity(
                env.pool,
                caller=env.ALICE,
                token_a=env.TOKEN_A,
                token_b=env.TOKEN_A,
                amount_a_desired=10,
                amount_b_desired=10,
                amount_a_min=0,
                amount_b_min=0,
                recipient=env.ALICE,
                deadline=env.deadline,
            )
        assert not env.pool.is_bound()

    def test_null_recipient_rejected(self, env) -> None:
        with pytest.raises(ZeroRecipient):
            env.deposit(100, 400, recipient=NULL_ADDRESS)


class TestRemoveLiquidity:
    def test_remove_everything_drains_pool(self, env) -> None:
        env.deposit(100, 400)
        assert env.withdraw(200) == (100, 400)
        assert env.pool.ledger.get() == (0, 0, 0)
        assert env.pool.is_empty()
        assert env.balances(env.ALICE) == (10**30, 10**30)
        assert env.balances(env.POOL) == (0, 0)
        assert env.pool.records[-1] == RemoveLiquidity(
            caller=env.ALICE,
            token_a=env.TOKEN_A,
            token_b=env.TOKEN_B,
            amount_a=100,
            amount_b=400,
            burned_claims=200,
        )

    def test_partial_remove_is_proportional(self, env) -> None:
        env.deposit(100, 400)
        assert env.withdraw(100) == (50, 200)
        assert env.pool.ledger.get() == (50, 200, 100)

    def test_emptied_pool_keeps_binding_and_accepts_new_ratio(self, env) -> None:
        env.deposit(100, 400)
        env.withdraw(200)
        assert env.pool.is_bound()
        assert env.deposit(9, 1) == (9, 1, 3)

    def test_remove_more_than_held_rejected(self, env) -> None:
        env.deposit(100, 400)
        with pytest.raises(InsufficientBalance):
            env.withdraw(201)
        with pytest.raises(InsufficientBalance):
            env.withdraw(1, caller=env.BOB)
        assert env.pool.ledger.get() == (100, 400, 200)

    def test_remove_to_other_recipient(self, env) -> None:
        env.deposit(100, 400)
        env.withdraw(100, recipient=env.BOB)
        assert env.balances(env.BOB) == (10**30 + 50, 10**30 + 200)

    def test_remove_min_guards(self, env) -> None:
        env.deposit(100, 400)
        with pytest.raises(InsufficientBAmount):
            remove_liquidity(
                env.pool,
                caller=env.ALICE,
                token_a=env.TOKEN_A,
                token_b=env.TOKEN_B,
                claim_amount=100,
                amount_a_min=50,
                amount_b_min=201,
                recipient=env.ALICE,
                deadline=env.deadline,
            )
        assert claim_balance_of(env.pool, env.ALICE) == 200

    def test_min_guards_checked_before_claim_balance(self, env) -> None:
        env.deposit(100, 400)
        # Bob holds no claims; a payout below his minimum is reported first.
        with pytest.raises(InsufficientBAmount):
            remove_liquidity(
                env.pool,
                caller=env.BOB,
                token_a=env.TOKEN_A,
                token_b=env.TOKEN_B,
                claim_amount=100,
                amount_a_min=0,
                amount_b_min=201,
                recipient=env.BOB,
                deadline=env.deadline,
            )
        with pytest.raises(InsufficientBalance):
            env.withdraw(100, caller=env.BOB)
        assert env.pool.ledger.get() == (100, 400, 200)

    def test_dust_side_of_a_partial_remove_is_paid_as_zero(self, env) -> None:
        assert env.deposit(1, 1_000_000) == (1, 1_000_000, 1000)
        assert env.withdraw(1) == (0, 1000)
        assert env.pool.ledger.get() == (1, 999_000, 999)
        assert env.balances(env.ALICE) == (10**30 - 1, 10**30 - 999_000)
        assert check_all(env.pool) == []

    def test_round_trip_never_returns_more_than_deposited(self, env) -> None:
        env.deposit(1_000, 3_000)
        env.sell_a(137)
        used_a, used_b, minted = env.deposit(333, 10**6, caller=env.BOB)
        out_a, out_b = env.withdraw(minted, caller=env.BOB)
        assert out_a <= used_a
        assert out_b <= used_b


class TestClaims:
    def test_transfer_moves_claims_without_touching_reserves(self, env) -> None:
        env.deposit(100, 400)
        transfer_claims(env.pool, sender=env.ALICE, recipient=env.BOB, amount=50)
        assert claim_balance_of(env.pool, env.ALICE) == 150
        assert claim_balance_of(env.pool, env.BOB) == 50
        assert env.pool.ledger.get() == (100, 400, 200)
        assert env.pool.records[-1] == ClaimTransfer(sender=env.ALICE, recipient=env.BOB, amount=50)

        assert env.withdraw(50, caller=env.BOB) == (25, 100)

    def test_transfer_more_than_held_rejected(self, env) -> None:
        env.deposit(100, 400)
        with pytest.raises(InsufficientBalance):
            transfer_claims(env.pool, sender=env.BOB, recipient=env.ALICE, amount=1)
        assert len(env.pool.records) == 1

    def test_quote_matches_reserve_ratio(self, env) -> None:
        env.deposit(100, 400)
        reserve_a, reserve_b, _ = env.pool.ledger.get()
        assert quote(50, reserve_a, reserve_b) == 200


POOL = "0x" + "99" * 20
TRADER = "0x" + "cc" * 20
TOKEN_A = "0x" + "11" * 20
TOKEN_B = "0x" + "22" * 20


def _seeded_pool(reserve_a: int, reserve_b: int) -> Pool:
    assets = {}
    for token in (TOKEN_A, TOKEN_B):
        asset = InMemoryAsset(token)
        asset.mint(TRADER, 1 << 120)
        asset.approve(TRADER, POOL, 1 << 120)
        assets[token] = asset.handle(POOL)
    pool = Pool(address=POOL, assets=assets, clock=lambda: 0)
    add_liquidity(
        pool,
        caller=TRADER,
        token_a=TOKEN_A,
        token_b=TOKEN_B,
        amount_a_desired=reserve_a,
        amount_b_desired=reserve_b,
        amount_a_min=0,
        amount_b_min=0,
        recipient=TRADER,
        deadline=0,
    )
    return pool


@settings(max_examples=60, deadline=None)
@given(
    st.integers(min_value=1, max_value=10**24),
    st.integers(min_value=1, max_value=10**24),
    st.lists(
        st.tuples(st.integers(min_value=0, max_value=10**24), st.integers(min_value=0, max_value=10**24)),
        min_size=1,
        max_size=8,
    ),
)
def test_every_deposit_keeps_the_reserve_ratio(reserve_a: int, reserve_b: int, deposits: list) -> None:
    pool = _seeded_pool(reserve_a, reserve_b)
    for amount_a, amount_b in deposits:
        before = pool.ledger.state
        try:
            add_liquidity(
                pool,
                caller=TRADER,
                token_a=TOKEN_A,
                token_b=TOKEN_B,
                amount_a_desired=amount_a,
                amount_b_desired=amount_b,
                amount_a_min=0,
                amount_b_min=0,
                recipient=TRADER,
                deadline=0,
            )
        except PoolError:
            assert pool.ledger.state == before
            continue
        after = pool.ledger.state
        # One side is taken whole and the other is its floored quote, so the
        # cross products differ by less than one unit of the quoting reserve.
        drift = after.reserve_a * before.reserve_b - before.reserve_a * after.reserve_b
        assert abs(drift) < max(before.reserve_a, before.reserve_b)
        assert after.total_supply > before.total_supply
        assert check_all(pool) == []

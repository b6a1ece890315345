# [TESTER] v1

from __future__ import annotations

import pytest
from hypothesis import assume, given, settings, strategies as st

from pairswap.errors import InsufficientInputAmount, InsufficientLiquidity, InsufficientOutputAmount
from pairswap.kernels.python.cpmm_swap import (
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    get_amount_in,
    get_amount_out,
    swap_exact_in,
    swap_exact_out,
)


_reserve = st.integers(min_value=1, max_value=(1 << 112) - 1)
_amount = st.integers(min_value=1, max_value=(1 << 112) - 1)


def test_fee_is_thirty_bps() -> None:
    assert (FEE_NUMERATOR, FEE_DENOMINATOR) == (997, 1000)


def test_get_amount_out_reference_value() -> None:
    # 100 * 997 * 1000 / (1000 * 1000 + 100 * 997) = 90.66...
    assert get_amount_out(reserve_in=1000, reserve_out=1000, amount_in=100) == 90


def test_get_amount_out_rejects_zero_input_and_empty_reserves() -> None:
    with pytest.raises(InsufficientInputAmount):
        get_amount_out(reserve_in=1000, reserve_out=1000, amount_in=0)
    with pytest.raises(InsufficientLiquidity):
        get_amount_out(reserve_in=0, reserve_out=1000, amount_in=10)
    with pytest.raises(InsufficientLiquidity):
        get_amount_out(reserve_in=1000, reserve_out=0, amount_in=10)


def test_get_amount_in_reference_value() -> None:
    # 1000 * 90 * 1000 / (910 * 997) = 99.19... -> 99 + 1
    assert get_amount_in(reserve_in=1000, reserve_out=1000, amount_out=90) == 100


def test_get_amount_in_rejects_draining_the_output_reserve() -> None:
    with pytest.raises(InsufficientLiquidity, match="drain"):
        get_amount_in(reserve_in=1000, reserve_out=1000, amount_out=1000)
    with pytest.raises(InsufficientOutputAmount):
        get_amount_in(reserve_in=1000, reserve_out=1000, amount_out=0)


def test_swap_exact_in_too_small_trade_rejected() -> None:
    # 1 * 997 * 10 < 10**6 * 1000: output floors to zero.
    with pytest.raises(InsufficientOutputAmount):
        swap_exact_in(reserve_in=10**6, reserve_out=10, amount_in=1)


def test_swap_exact_out_moves_reserves_by_requested_output() -> None:
    res = swap_exact_out(reserve_in=1, reserve_out=4, amount_out=1)
    assert res.new_reserve_in == 1 + res.amount_in
    assert res.new_reserve_out == 3
    assert get_amount_out(reserve_in=1, reserve_out=4, amount_in=res.amount_in) >= 1


@settings(max_examples=300, deadline=None)
@given(_reserve, _reserve, _amount)
def test_output_never_exceeds_no_fee_bound(reserve_in: int, reserve_out: int, amount_in: int) -> None:
    out = get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    assert out < reserve_out
    # Fee-free constant product: amount_in * reserve_out / (reserve_in + amount_in).
    assert out * (reserve_in + amount_in) < amount_in * reserve_out


@settings(max_examples=300, deadline=None)
@given(_reserve, _reserve, _amount, st.integers(min_value=1, max_value=1 << 64))
def test_output_is_monotone_in_input(reserve_in: int, reserve_out: int, amount_in: int, extra: int) -> None:
    small = get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    large = get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in + extra)
    assert large >= small


@settings(max_examples=300, deadline=None)
@given(_reserve, _reserve, _amount)
def test_swap_exact_in_strictly_increases_product(reserve_in: int, reserve_out: int, amount_in: int) -> None:
    out = get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    assume(out > 0)
    res = swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
    assert res.amount_out == out
    assert res.k_after > res.k_before
    assert res.k_after == res.new_reserve_in * res.new_reserve_out


@settings(max_examples=300, deadline=None)
@given(_reserve, st.integers(min_value=2, max_value=(1 << 112) - 1), st.data())
def test_get_amount_in_covers_requested_output(reserve_in: int, reserve_out: int, data: st.DataObject) -> None:
    amount_out = data.draw(st.integers(min_value=1, max_value=reserve_out - 1))
    amount_in = get_amount_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_out=amount_out)
    assert get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in) >= amount_out
    res = swap_exact_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_out=amount_out)
    assert res.k_after > res.k_before

"""
Swap engine: constant-product quotes and swaps with a fixed 0.3% fee.

Quotes are pure (`get_amount_out`, `get_amount_in`). Swaps run as one pool
transaction: the input is pulled, the output is priced against the reserves as
they stood before this trade, the ledger is committed, and only then is the
output pushed to the recipient.

Invariant: after each swap, reserve_in' * reserve_out' > reserve_in * reserve_out.
"""

from __future__ import annotations

from ..errors import ExcessiveInputAmount, IdenticalAssets, InsufficientOutputAmount, InvariantViolation
from ..kernels.python import cpmm_swap as _kernel
from ..kernels.python.fixed_point import require_uint
from ..state.types import Address, Amount, require_address
from .pool import Pool
from .records import Swap


def get_amount_out(reserve_in: Amount, reserve_out: Amount, amount_in: Amount) -> Amount:
    """
    Output for an exact input:
        amount_in_with_fee = amount_in * 997
        amount_out = floor(amount_in_with_fee * reserve_out / (reserve_in * 1000 + amount_in_with_fee))

    Raises:
        InsufficientInputAmount: If amount_in is zero
        InsufficientLiquidity: If either reserve is zero
    """
    return _kernel.get_amount_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)


def get_amount_in(reserve_in: Amount, reserve_out: Amount, amount_out: Amount) -> Amount:
    """
    Minimal input for an exact output (rounded up).

    Raises:
        InsufficientOutputAmount: If amount_out is zero
        InsufficientLiquidity: If a reserve is zero or amount_out >= reserve_out
    """
    return _kernel.get_amount_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_out=amount_out)


def _swap_args(pool: Pool, token_in: Address, token_out: Address, recipient: Address, deadline: int):
    pool.check_deadline(deadline)
    recipient = pool.check_recipient(recipient)
    token_in = require_address(token_in, name="token_in")
    token_out = require_address(token_out, name="token_out")
    if token_in == token_out:
        raise IdenticalAssets(f"token_in == token_out: {token_in}")
    side_in = pool.orientation(token_in, token_out)
    return token_in, token_out, recipient, side_in


def _commit_swap(pool: Pool, side_in, res: _kernel.SwapResult) -> None:
    pool.ledger.apply_swap_in(side_in, res.amount_in, res.amount_out)
    k_after = pool.ledger.state.get_constant_product()
    if k_after <= res.k_before:
        raise InvariantViolation([f"swap_product_increases: {k_after} <= {res.k_before}"])


def swap_exact_in(
    pool: Pool,
    *,
    caller: Address,
    amount_in: Amount,
    amount_out_min: Amount,
    token_in: Address,
    token_out: Address,
    recipient: Address,
    deadline: int,
) -> Amount:
    """
    Sell exactly `amount_in` of `token_in` for at least `amount_out_min` of `token_out`.

    A trade too small to buy a single unit of `token_out` raises
    InsufficientOutputAmount even when `amount_out_min` is zero.

    Returns:
        amount_out paid to `recipient`

    Raises:
        Expired, ZeroRecipient, IdenticalAssets, InvalidAssetPair,
        InsufficientInputAmount, InsufficientLiquidity, InsufficientOutputAmount,
        TransferFailed, ArithmeticFault
    """
    with pool.transaction("swap_exact_in"):
        token_in, token_out, recipient, side_in = _swap_args(pool, token_in, token_out, recipient, deadline)
        caller = require_address(caller, name="caller")
        require_uint("amount_in", amount_in)
        require_uint("amount_out_min", amount_out_min)

        # Ledger reserves are untouched by the pull: pricing uses the pre-trade reserves.
        pool.pull(token_in, caller, amount_in)

        reserve_in, reserve_out = pool.reserves_for(side_in)
        res = _kernel.swap_exact_in(reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in)
        if res.amount_out < amount_out_min:
            raise InsufficientOutputAmount(f"amount_out ({res.amount_out}) < amount_out_min ({amount_out_min})")

        _commit_swap(pool, side_in, res)
        pool.push(token_out, recipient, res.amount_out)
        pool.emit(
            Swap(
                caller=caller,
                token_in=token_in,
                token_out=token_out,
                amount_in=res.amount_in,
                amount_out=res.amount_out,
            )
        )
    return res.amount_out


def swap_exact_out(
    pool: Pool,
    *,
    caller: Address,
    amount_out: Amount,
    amount_in_max: Amount,
    token_in: Address,
    token_out: Address,
    recipient: Address,
    deadline: int,
) -> Amount:
    """
    Buy exactly `amount_out` of `token_out`, paying at most `amount_in_max` of `token_in`.

    Returns:
        amount_in pulled from `caller`

    Raises:
        Expired, ZeroRecipient, IdenticalAssets, InvalidAssetPair,
        InsufficientOutputAmount, InsufficientLiquidity, ExcessiveInputAmount,
        TransferFailed, ArithmeticFault
    """
    with pool.transaction("swap_exact_out"):
        token_in, token_out, recipient, side_in = _swap_args(pool, token_in, token_out, recipient, deadline)
        caller = require_address(caller, name="caller")
        require_uint("amount_out", amount_out)
        require_uint("amount_in_max", amount_in_max)

        reserve_in, reserve_out = pool.reserves_for(side_in)
        res = _kernel.swap_exact_out(reserve_in=reserve_in, reserve_out=reserve_out, amount_out=amount_out)
        if res.amount_in > amount_in_max:
            raise ExcessiveInputAmount(f"amount_in ({res.amount_in}) > amount_in_max ({amount_in_max})")

        pool.pull(token_in, caller, res.amount_in)
        _commit_swap(pool, side_in, res)
        pool.push(token_out, recipient, res.amount_out)
        pool.emit(
            Swap(
                caller=caller,
                token_in=token_in,
                token_out=token_out,
                amount_in=res.amount_in,
                amount_out=res.amount_out,
            )
        )
    return res.amount_in

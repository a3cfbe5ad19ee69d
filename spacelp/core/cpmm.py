"""
Constant Product Market Maker (CPMM) math for the ETH/SPC pool.

All formulas use integer arithmetic with floor rounding. Rounding always
favors the pool: traders and withdrawers may receive slightly less than the
continuous ideal, never more.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per operation
- Invariant: After each swap, x' * y' > x * y (the fee stays in the reserves)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from ..config import PoolConfig, RouterConfig
from ..errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
)
from ..state.balances import Amount, require_int


DEFAULT_POOL_CONFIG = PoolConfig()


def _require_non_negative(**values: int) -> None:
    for name, v in values.items():
        require_int(name, v)
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    input_after_fee: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def initial_shares(amount_eth: Amount, amount_spc: Amount) -> Amount:
    """
    Shares minted by the first deposit into an empty pool.

        shares = floor(sqrt(amount_eth * amount_spc))

    The geometric mean is zero only for a degenerate deposit and scales
    linearly with both amounts, so later proportional mints stay consistent.
    There is no locked minimum: burning every share empties the pool.

    Raises:
        InsufficientLiquidityMinted: If the result is zero
    """
    _require_non_negative(amount_eth=amount_eth, amount_spc=amount_spc)
    shares = math.isqrt(amount_eth * amount_spc)
    if shares == 0:
        raise InsufficientLiquidityMinted()
    return shares


def compute_shares_minted(
    reserve_eth: Amount,
    reserve_spc: Amount,
    delta_eth: Amount,
    delta_spc: Amount,
    total_shares: Amount,
) -> Amount:
    """
    Compute shares to mint for a deposit.

    For the first deposit (total_shares == 0) see `initial_shares`.

    For subsequent deposits:
        shares = min(floor(delta_eth * total_shares / reserve_eth),
                     floor(delta_spc * total_shares / reserve_spc))

    Taking the lower ratio means over-supplying one asset mints nothing extra;
    the surplus accrues to existing holders.

    Args:
        reserve_eth: Recognized ETH reserve before the deposit
        reserve_spc: Recognized SPC reserve before the deposit
        delta_eth: ETH received since the last recognized state
        delta_spc: SPC received since the last recognized state
        total_shares: Share supply before the deposit

    Returns:
        Amount of shares to mint

    Raises:
        InsufficientLiquidityMinted: If the computed amount is zero
    """
    _require_non_negative(
        reserve_eth=reserve_eth,
        reserve_spc=reserve_spc,
        delta_eth=delta_eth,
        delta_spc=delta_spc,
        total_shares=total_shares,
    )

    if total_shares == 0:
        return initial_shares(delta_eth, delta_spc)

    if reserve_eth == 0 or reserve_spc == 0:
        raise ValueError("cannot mint into an empty pool when total_shares > 0")

    shares = min(
        (delta_eth * total_shares) // reserve_eth,
        (delta_spc * total_shares) // reserve_spc,
    )
    if shares == 0:
        raise InsufficientLiquidityMinted()
    return shares


def compute_withdrawal(
    shares: Amount,
    balance_eth: Amount,
    balance_spc: Amount,
    total_shares: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute assets paid out for burning `shares`.

    Formula:
        eth_out = floor(balance_eth * shares / total_shares)
        spc_out = floor(balance_spc * shares / total_shares)

    Raises:
        InsufficientLiquidityBurned: If either payout is zero
    """
    _require_non_negative(
        shares=shares,
        balance_eth=balance_eth,
        balance_spc=balance_spc,
        total_shares=total_shares,
    )
    if shares > total_shares:
        raise ValueError(f"Cannot burn more shares than supply: {shares} > {total_shares}")
    if total_shares == 0:
        raise InsufficientLiquidityBurned()

    eth_out = (balance_eth * shares) // total_shares
    spc_out = (balance_spc * shares) // total_shares
    if eth_out == 0 or spc_out == 0:
        raise InsufficientLiquidityBurned()
    return eth_out, spc_out


def get_maximum_amount_out(
    amount_in: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Amount:
    """
    Maximum output obtainable for `amount_in` under the constant product formula.

        input_after_fee = floor(amount_in * fee_numerator / fee_denominator)
        amount_out = floor(reserve_out * input_after_fee / (reserve_in + input_after_fee))

    May return 0 for dust inputs; callers that execute trades must reject that.

    Raises:
        InsufficientLiquidity: If reserve_out is zero
    """
    _require_non_negative(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out)
    if reserve_out == 0:
        raise InsufficientLiquidity()

    input_after_fee = (amount_in * config.fee_numerator) // config.fee_denominator
    denominator = reserve_in + input_after_fee
    if denominator == 0:
        return 0
    return (reserve_out * input_after_fee) // denominator


def quote_swap(
    amount_in: Amount,
    reserve_in: Amount,
    reserve_out: Amount,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> SwapQuote:
    """
    Price an exact-in swap and compute the post-swap reserves.

    Post-swap reserves:
        new_reserve_in = reserve_in + amount_in  (fee stays in pool)
        new_reserve_out = reserve_out - amount_out

    Raises:
        InsufficientInputAmount: If amount_in is zero
        InsufficientLiquidity: If either reserve is empty or the output rounds to zero
    """
    _require_non_negative(amount_in=amount_in, reserve_in=reserve_in, reserve_out=reserve_out)
    if amount_in == 0:
        raise InsufficientInputAmount()
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity()

    amount_out = get_maximum_amount_out(amount_in, reserve_in, reserve_out, config)
    if amount_out == 0:
        raise InsufficientLiquidity()

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise AssertionError(f"Invariant violation: new_k ({k_after}) < old_k ({k_before})")

    return SwapQuote(
        amount_in=amount_in,
        input_after_fee=(amount_in * config.fee_numerator) // config.fee_denominator,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def optimal_deposit_eth(
    spc_in: Amount,
    reserve_eth: Amount,
    reserve_spc: Amount,
    fallback: RouterConfig = RouterConfig(),
) -> Amount:
    """
    ETH that matches `spc_in` at the current reserve ratio.

    Uses the fallback ratio while the pool is empty. Any positive input yields
    at least 1 so that truncation alone never causes a zero-share mint.
    """
    _require_non_negative(spc_in=spc_in, reserve_eth=reserve_eth, reserve_spc=reserve_spc)
    if spc_in == 0:
        return 0
    if reserve_eth == 0 or reserve_spc == 0:
        eth = (spc_in * fallback.fallback_eth) // fallback.fallback_spc
    else:
        eth = (spc_in * reserve_eth) // reserve_spc
    return max(eth, 1)

"""
Core pool logic: constant-product math, the SpaceLP pool and the router
"""

from .cpmm import (
    SwapQuote,
    compute_shares_minted,
    compute_withdrawal,
    get_maximum_amount_out,
    initial_shares,
    optimal_deposit_eth,
    quote_swap,
)
from .events import LiquidityAdded, LiquidityWithdrawn, PoolEvent, Swapped, event_to_dict
from .pool import SpaceLP
from .router import SpaceRouter
from .transfers import TokenLedger, safe_transfer, safe_transfer_from, send_native

__all__ = [
    "LiquidityAdded",
    "LiquidityWithdrawn",
    "PoolEvent",
    "SpaceLP",
    "SpaceRouter",
    "SwapQuote",
    "Swapped",
    "TokenLedger",
    "compute_shares_minted",
    "compute_withdrawal",
    "event_to_dict",
    "get_maximum_amount_out",
    "initial_shares",
    "optimal_deposit_eth",
    "quote_swap",
    "safe_transfer",
    "safe_transfer_from",
    "send_native",
]

"""
State management for the SpaceLP pool
"""

from .balances import Address, AllowanceTable, Amount, BalanceTable
from .pools import PoolState
from .shares import ShareLedger

__all__ = [
    "Address",
    "AllowanceTable",
    "Amount",
    "BalanceTable",
    "PoolState",
    "ShareLedger",
]

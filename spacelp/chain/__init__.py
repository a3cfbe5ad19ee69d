"""
Execution environment the pool runs against: native asset, contracts, token ledger
"""

from .chain import Chain, ContractEntry
from .token import ONE_SPC, SpaceCoin

__all__ = [
    "Chain",
    "ContractEntry",
    "ONE_SPC",
    "SpaceCoin",
]

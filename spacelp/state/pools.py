"""
Pool state for the SpaceLP ETH/SPC pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..errors import PoolInvariantError
from .balances import Amount


@dataclass
class PoolState:
    """
    Recognized state of the liquidity pool.

    Recognized reserves can lag the pool's actual custody: unsolicited
    transfers ("donations") are only folded in by the next mutating call.

    Attributes:
        reserve_eth: Recognized native-asset reserve
        reserve_spc: Recognized token reserve
        total_shares: Outstanding pool shares
        locked: Reentrancy flag, True only while a mutating call is in flight
    """
    reserve_eth: Amount = 0
    reserve_spc: Amount = 0
    total_shares: Amount = 0
    locked: bool = False

    def __post_init__(self) -> None:
        violations = self.check_invariants()
        if violations:
            raise PoolInvariantError(violations)

    @property
    def is_initialized(self) -> bool:
        return self.total_shares > 0

    def get_constant_product(self) -> int:
        """
        Compute k = reserve_eth * reserve_spc.
        """
        return self.reserve_eth * self.reserve_spc

    def check_invariants(self) -> List[str]:
        """Return the names of all violated invariants (empty when healthy)."""
        violations: List[str] = []
        if self.reserve_eth < 0 or self.reserve_spc < 0:
            violations.append("reserves_non_negative")
        if self.total_shares < 0:
            violations.append("total_shares_non_negative")
        if (self.reserve_eth == 0) != (self.reserve_spc == 0):
            violations.append("reserves_empty_together")
        if (self.total_shares == 0) != (self.reserve_eth == 0):
            violations.append("shares_iff_reserves")
        return violations

    def verify_invariants(self) -> None:
        violations = self.check_invariants()
        if violations:
            raise PoolInvariantError(violations)

    def __repr__(self) -> str:
        return (
            f"PoolState(reserves=({self.reserve_eth}, {self.reserve_spc}), "
            f"total_shares={self.total_shares}, locked={self.locked})"
        )

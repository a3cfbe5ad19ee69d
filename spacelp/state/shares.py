"""
Pool share ledger.

Shares are a plain fungible ledger: no transfer tax, no hooks. Total supply is
kept equal to `PoolState.total_shares` by the pool, which is the only caller of
`mint` / `burn`.
"""

from __future__ import annotations

import copy
from typing import Any

from .balances import Address, AllowanceTable, Amount, BalanceTable


class ShareLedger:
    """
    Balances and allowances of pool shares.

    Notes:
    - Balances are always non-negative.
    - `transfer` / `transfer_from` return True on success and raise on failure,
      matching the token ledger interface.
    """

    symbol = "SPC-LP"

    def __init__(self, address: Address) -> None:
        self.address = address
        self._balances = BalanceTable()
        self._allowances = AllowanceTable()
        self._total_supply: Amount = 0

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get(owner, spender)

    def approve(self, owner: Address, spender: Address, amount: Amount) -> bool:
        self._allowances.approve(owner, spender, amount)
        return True

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        self._balances.move(sender, to, amount)
        return True

    def transfer_from(self, spender: Address, owner: Address, to: Address, amount: Amount) -> bool:
        self._allowances.spend(owner, spender, amount)
        self._balances.move(owner, to, amount)
        return True

    def mint(self, to: Address, amount: Amount) -> None:
        self._balances.credit(to, amount)
        self._total_supply += amount

    def burn(self, holder: Address, amount: Amount) -> None:
        self._balances.debit(holder, amount)
        self._total_supply -= amount

    def verify_supply(self) -> bool:
        """Verify that the sum of balances equals total supply."""
        return self._balances.total() == self._total_supply

    def snapshot(self) -> Any:
        return copy.deepcopy((self._balances, self._allowances, self._total_supply))

    def restore(self, snap: Any) -> None:
        balances, allowances, total_supply = copy.deepcopy(snap)
        self._balances = balances
        self._allowances = allowances
        self._total_supply = total_supply

    def __repr__(self) -> str:
        return f"ShareLedger(total_supply={self._total_supply}, holders={self._balances!r})"

"""
Balance and allowance tables shared by the native asset, the token ledger and
the share ledger.

Implements BalanceTable[Address] -> Amount and AllowanceTable[(owner, spender)] -> Amount.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..errors import InsufficientAllowance, InsufficientBalance


# Type aliases
Address = str  # Account or contract address
Amount = int  # Non-negative integer in base units (no decimals)


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_amount(name: str, value: int) -> None:
    require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


class BalanceTable:
    """
    Sparse balance table mapping address -> amount.

    Zero balances are omitted so two tables with the same holdings compare equal.
    """

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}

    def get(self, address: Address) -> Amount:
        """Get balance for `address`. Returns 0 if not found."""
        return self._balances.get(address, 0)

    def set(self, address: Address, amount: Amount) -> None:
        """
        Set balance for `address`.

        Raises:
            ValueError: If amount is negative
        """
        _require_amount("amount", amount)
        if amount == 0:
            self._balances.pop(address, None)
        else:
            self._balances[address] = amount

    def credit(self, address: Address, amount: Amount) -> None:
        _require_amount("amount", amount)
        self.set(address, self.get(address) + amount)

    def debit(self, address: Address, amount: Amount) -> None:
        """
        Subtract `amount` from `address`.

        Raises:
            InsufficientBalance: If the balance is lower than `amount`
        """
        _require_amount("amount", amount)
        current = self.get(address)
        if amount > current:
            raise InsufficientBalance(address, current, amount)
        self.set(address, current - amount)

    def move(self, sender: Address, to: Address, amount: Amount) -> None:
        self.debit(sender, amount)
        self.credit(to, amount)

    def total(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Address, Amount]:
        return dict(self._balances)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BalanceTable):
            return NotImplemented
        return self._balances == other._balances

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"


class AllowanceTable:
    """Spending allowances mapping (owner, spender) -> amount."""

    def __init__(self) -> None:
        self._allowances: Dict[Tuple[Address, Address], Amount] = {}

    def get(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def approve(self, owner: Address, spender: Address, amount: Amount) -> None:
        _require_amount("amount", amount)
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount

    def spend(self, owner: Address, spender: Address, amount: Amount) -> None:
        """
        Consume `amount` of the allowance `owner` granted to `spender`.

        Raises:
            InsufficientAllowance: If the allowance is lower than `amount`
        """
        _require_amount("amount", amount)
        current = self.get(owner, spender)
        if amount > current:
            raise InsufficientAllowance(owner, spender, current, amount)
        self.approve(owner, spender, current - amount)

    def __repr__(self) -> str:
        return f"AllowanceTable({len(self._allowances)} entries)"

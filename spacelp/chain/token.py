"""
SpaceCoin (SPC): fungible token ledger with an optional transfer tax.

When the tax is on, every transfer (plain or delegated) debits the sender the
full amount, credits the treasury `floor(amount * tax_bps / 10_000)` and the
recipient the remainder. The pool and router must therefore measure what
actually arrived instead of trusting declared amounts.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping, Optional

from ..config import BPS_DENOM, TokenConfig
from ..errors import FlagUnchanged, Unauthorized
from ..state.balances import Address, AllowanceTable, Amount, BalanceTable
from .chain import Chain


logger = logging.getLogger(__name__)

DECIMALS = 18
ONE_SPC = 10**DECIMALS


class SpaceCoin:
    name = "SpaceCoin"
    symbol = "SPC"
    decimals = DECIMALS

    def __init__(
        self,
        chain: Chain,
        *,
        owner: Address,
        treasury: Address,
        initial_balances: Optional[Mapping[Address, Amount]] = None,
        address: Address = "spacecoin",
        config: TokenConfig = TokenConfig(),
    ) -> None:
        self.chain = chain
        self.address = address
        self.owner = owner
        self.treasury = treasury
        self.tax_bps = config.tax_bps
        self._balances = BalanceTable()
        self._allowances = AllowanceTable()
        self._tax_transfers = False
        self._total_supply: Amount = 0
        for holder, amount in (initial_balances or {}).items():
            self._balances.credit(holder, amount)
            self._total_supply += amount
        chain.register_contract(address, self)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    @property
    def tax_transfers(self) -> bool:
        return self._tax_transfers

    def balance_of(self, holder: Address) -> Amount:
        return self._balances.get(holder)

    def allowance(self, owner: Address, spender: Address) -> Amount:
        return self._allowances.get(owner, spender)

    def compute_tax(self, amount: Amount) -> Amount:
        """Tax withheld from a transfer of `amount` (rounds down)."""
        if not self._tax_transfers:
            return 0
        return (amount * self.tax_bps) // BPS_DENOM

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def approve(self, owner: Address, spender: Address, amount: Amount) -> bool:
        with self.chain.atomic():
            self._allowances.approve(owner, spender, amount)
        return True

    def transfer(self, sender: Address, to: Address, amount: Amount) -> bool:
        with self.chain.atomic():
            self._move(sender, to, amount)
        return True

    def transfer_from(self, spender: Address, owner: Address, to: Address, amount: Amount) -> bool:
        with self.chain.atomic():
            self._allowances.spend(owner, spender, amount)
            self._move(owner, to, amount)
        return True

    def set_tax_transfers(self, caller: Address, flag: bool) -> None:
        if caller != self.owner:
            raise Unauthorized(caller)
        if flag == self._tax_transfers:
            raise FlagUnchanged(flag)
        self._tax_transfers = flag
        logger.info("SPC transfer tax %s", "enabled" if flag else "disabled")

    def _move(self, sender: Address, to: Address, amount: Amount) -> None:
        tax = self.compute_tax(amount)
        self._balances.debit(sender, amount)
        self._balances.credit(to, amount - tax)
        if tax:
            self._balances.credit(self.treasury, tax)

    # ------------------------------------------------------------------
    # Chain snapshot hooks
    # ------------------------------------------------------------------

    def snapshot(self) -> Any:
        return copy.deepcopy((self._balances, self._allowances, self._tax_transfers, self._total_supply))

    def restore(self, snap: Any) -> None:
        balances, allowances, tax_transfers, total_supply = copy.deepcopy(snap)
        self._balances = balances
        self._allowances = allowances
        self._tax_transfers = tax_transfers
        self._total_supply = total_supply

    def __repr__(self) -> str:
        return f"SpaceCoin(total_supply={self._total_supply}, tax_transfers={self._tax_transfers})"

"""
In-process chain simulation: native balances, contracts and atomic calls.

The pool and router run against this execution environment the way they
would on a real chain:
- native value attached to a call is credited before the callee runs (`pay`),
- outbound native transfers run the recipient's receive hook synchronously
  and report failure instead of raising (`send`),
- every public entry point runs inside `atomic()`, so a failing call leaves no
  partial state behind.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import ReceiveRejected
from ..state.balances import Address, Amount, BalanceTable


logger = logging.getLogger(__name__)

# receiver(sender, amount) runs when native value is sent to a contract.
Receiver = Callable[[Address, Amount], None]


@dataclass(frozen=True)
class ContractEntry:
    address: Address
    component: Optional[Any] = None
    receiver: Optional[Receiver] = None


class Chain:
    """Native-asset ledger plus the registry of deployed contracts."""

    def __init__(self) -> None:
        self._native = BalanceTable()
        self._contracts: Dict[Address, ContractEntry] = {}
        self._depth = 0

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def register_contract(
        self,
        address: Address,
        component: Optional[Any] = None,
        *,
        receiver: Optional[Receiver] = None,
    ) -> None:
        """
        Deploy a contract at `address`.

        `component` must provide `snapshot()` / `restore(snap)`; its state is
        captured by `atomic()`. Contracts without a `receiver` reject plain
        native sends. A deployment inside a scope that rolls back is undone.
        """
        if self.is_contract(address):
            raise ValueError(f"address already in use: {address}")
        self._contracts[address] = ContractEntry(address=address, component=component, receiver=receiver)

    def is_contract(self, address: Address) -> bool:
        return address in self._contracts

    # ------------------------------------------------------------------
    # Native asset
    # ------------------------------------------------------------------

    def balance_of(self, address: Address) -> Amount:
        return self._native.get(address)

    def mint_native(self, to: Address, amount: Amount) -> None:
        """Credit `amount` out of thin air (genesis allocation / test funding)."""
        self._native.credit(to, amount)

    def pay(self, sender: Address, to: Address, amount: Amount) -> None:
        """Move value attached to a call. Raises InsufficientBalance."""
        if amount:
            self._native.move(sender, to, amount)

    def force_feed(self, sender: Address, to: Address, amount: Amount) -> None:
        """Unsolicited transfer that bypasses receive hooks (a donation)."""
        self._native.move(sender, to, amount)
        logger.debug("force-fed %d from %s to %s", amount, sender, to)

    def send(self, sender: Address, to: Address, amount: Amount) -> bool:
        """
        Transfer native value and run the recipient's receive hook.

        Returns False (with the transfer and everything the hook did rolled
        back) if the sender lacks funds, the recipient is a contract without a
        receive hook, or the hook raises.
        """
        try:
            with self.atomic():
                self._native.move(sender, to, amount)
                entry = self._contracts.get(to)
                if entry is not None:
                    if entry.receiver is None:
                        raise ReceiveRejected(to)
                    entry.receiver(sender, amount)
        except Exception as exc:
            logger.debug("native send of %d from %s to %s reverted: %s", amount, sender, to, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def _snapshot(self) -> Tuple[Dict[Address, ContractEntry], Dict[Address, Amount], List[Any]]:
        components = [e.component.snapshot() for e in self._contracts.values() if e.component is not None]
        return dict(self._contracts), self._native.get_all_balances(), components

    def _restore(self, snaps: Tuple[Dict[Address, ContractEntry], Dict[Address, Amount], List[Any]]) -> None:
        registry, native, rest = snaps
        self._contracts = dict(registry)
        table = BalanceTable()
        for address, amount in native.items():
            table.set(address, amount)
        self._native = table
        components = [e.component for e in self._contracts.values() if e.component is not None]
        for component, snap in zip(components, rest):
            component.restore(snap)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Run a block all-or-nothing.

        Nested blocks roll back only their own scope, so a reverted inner call
        (e.g. a failed reentrant call inside a receive hook) does not undo the
        outer one unless the error propagates.
        """
        snaps = self._snapshot()
        self._depth += 1
        try:
            yield
        except Exception:
            self._restore(snaps)
            logger.debug("rolled back transaction at depth %d", self._depth)
            raise
        finally:
            self._depth -= 1

    def __repr__(self) -> str:
        return f"Chain(contracts={sorted(self._contracts)}, native={self._native!r})"

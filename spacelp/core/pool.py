"""
SpaceLP: the ETH/SPC constant-product pool.

Push-based interface:
- deposit: send SPC to the pool, then call `deposit` with the ETH attached.
- withdraw: transfer shares to the pool, then call `withdraw`.
- swap: send SPC to the pool (or attach ETH), then call `swap`.

Each mutating call reads the pool's actual custody and treats everything above
the recognized reserves as received for that call. Unsolicited transfers are
therefore folded into the next operation instead of being stranded.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Tuple

from ..chain.chain import Chain
from ..config import PoolConfig
from ..errors import ReentrancyLockEngaged
from ..state.balances import Address, Amount
from ..state.pools import PoolState
from ..state.shares import ShareLedger
from .cpmm import compute_shares_minted, compute_withdrawal, get_maximum_amount_out, quote_swap
from .events import LiquidityAdded, LiquidityWithdrawn, PoolEvent, Swapped
from .transfers import TokenLedger, safe_transfer, send_native


logger = logging.getLogger(__name__)


class SpaceLP:
    def __init__(
        self,
        chain: Chain,
        token: TokenLedger,
        *,
        address: Address = "spacelp",
        config: PoolConfig = PoolConfig(),
    ) -> None:
        self.chain = chain
        self.token = token
        self.address = address
        self.config = config
        self.state = PoolState()
        self.shares = ShareLedger(address)
        self.events: List[PoolEvent] = []
        # No receive hook: plain native sends to the pool are rejected.
        chain.register_contract(address, self)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def get_reserves(self) -> Tuple[Amount, Amount]:
        return self.state.reserve_eth, self.state.reserve_spc

    def _actual_balances(self) -> Tuple[Amount, Amount]:
        return self.chain.balance_of(self.address), self.token.balance_of(self.address)

    def get_maximum_amount_out(self, amount_in: Amount, is_eth_in: bool) -> Amount:
        """Quote against the recognized reserves (pending donations are not included)."""
        reserve_eth, reserve_spc = self.get_reserves()
        if is_eth_in:
            return get_maximum_amount_out(amount_in, reserve_eth, reserve_spc, self.config)
        return get_maximum_amount_out(amount_in, reserve_spc, reserve_eth, self.config)

    # ------------------------------------------------------------------
    # Reentrancy lock
    # ------------------------------------------------------------------

    @contextmanager
    def _lock(self) -> Iterator[None]:
        if self.state.locked:
            raise ReentrancyLockEngaged()
        self.state.locked = True
        try:
            yield
        finally:
            self.state.locked = False

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def deposit(self, sender: Address, to: Address, *, value: Amount = 0) -> Amount:
        """
        Mint shares to `to` for the assets received since the last recognized state.

        Returns:
            Shares minted

        Raises:
            InsufficientLiquidityMinted: If the deposit is worth zero shares
        """
        with self.chain.atomic(), self._lock():
            self.chain.pay(sender, self.address, value)
            balance_eth, balance_spc = self._actual_balances()
            state = self.state
            delta_eth = balance_eth - state.reserve_eth
            delta_spc = balance_spc - state.reserve_spc

            minted = compute_shares_minted(
                state.reserve_eth,
                state.reserve_spc,
                delta_eth,
                delta_spc,
                state.total_shares,
            )

            state.reserve_eth = balance_eth
            state.reserve_spc = balance_spc
            state.total_shares += minted
            self.shares.mint(to, minted)
            state.verify_invariants()

            self.events.append(LiquidityAdded(provider=to, eth_in=delta_eth, spc_in=delta_spc, shares=minted))
            logger.info("deposit to=%s eth=%d spc=%d shares=%d", to, delta_eth, delta_spc, minted)
            return minted

    def withdraw(self, sender: Address, to: Address) -> Tuple[Amount, Amount]:
        """
        Burn the shares held by the pool and pay `to` a proportional slice of custody.

        Returns:
            Tuple of (eth_out, spc_out)

        Raises:
            InsufficientLiquidityBurned: If either payout rounds to zero
            EthTransferFailed: If `to` rejects the native payout
            TokenTransferFailed: If the token ledger reports a failed transfer
        """
        with self.chain.atomic(), self._lock():
            balance_eth, balance_spc = self._actual_balances()
            state = self.state
            burned = self.shares.balance_of(self.address)
            if balance_eth > state.reserve_eth or balance_spc > state.reserve_spc:
                logger.debug(
                    "withdrawal pays out unrecognized eth=%d spc=%d",
                    balance_eth - state.reserve_eth,
                    balance_spc - state.reserve_spc,
                )

            eth_out, spc_out = compute_withdrawal(burned, balance_eth, balance_spc, state.total_shares)

            self.shares.burn(self.address, burned)
            state.total_shares -= burned
            state.reserve_eth = balance_eth - eth_out
            state.reserve_spc = balance_spc - spc_out
            state.verify_invariants()

            safe_transfer(self.token, self.address, to, spc_out)
            send_native(self.chain, self.address, to, eth_out)

            self.events.append(LiquidityWithdrawn(provider=to, eth_out=eth_out, spc_out=spc_out, shares=burned))
            logger.info("withdraw to=%s eth=%d spc=%d shares=%d", to, eth_out, spc_out, burned)
            return eth_out, spc_out

    def swap(self, sender: Address, to: Address, is_eth_in: bool, *, value: Amount = 0) -> Amount:
        """
        Swap the input received since the last recognized state and pay the output to `to`.

        Donations on the input side count as input; donations on the output
        side deepen the pool for this trade.

        Returns:
            Output amount sent to `to`

        Raises:
            InsufficientInputAmount: If nothing was received on the input side
            InsufficientLiquidity: If the pool is empty or the output rounds to zero
        """
        with self.chain.atomic(), self._lock():
            self.chain.pay(sender, self.address, value)
            balance_eth, balance_spc = self._actual_balances()
            state = self.state

            donated_out = balance_spc - state.reserve_spc if is_eth_in else balance_eth - state.reserve_eth
            if donated_out:
                logger.debug("folding %d unrecognized output-side units into swap", donated_out)

            if is_eth_in:
                quote = quote_swap(balance_eth - state.reserve_eth, state.reserve_eth, balance_spc, self.config)
                state.reserve_eth = quote.new_reserve_in
                state.reserve_spc = quote.new_reserve_out
            else:
                quote = quote_swap(balance_spc - state.reserve_spc, state.reserve_spc, balance_eth, self.config)
                state.reserve_spc = quote.new_reserve_in
                state.reserve_eth = quote.new_reserve_out
            state.verify_invariants()

            if is_eth_in:
                safe_transfer(self.token, self.address, to, quote.amount_out)
                event = Swapped(trader=to, eth_in=quote.amount_in, spc_in=0, eth_out=0, spc_out=quote.amount_out)
            else:
                send_native(self.chain, self.address, to, quote.amount_out)
                event = Swapped(trader=to, eth_in=0, spc_in=quote.amount_in, eth_out=quote.amount_out, spc_out=0)

            self.events.append(event)
            logger.info(
                "swap to=%s %s in=%d out=%d k=%d->%d",
                to,
                "ETH->SPC" if is_eth_in else "SPC->ETH",
                quote.amount_in,
                quote.amount_out,
                quote.k_before,
                quote.k_after,
            )
            return quote.amount_out

    # ------------------------------------------------------------------
    # Chain snapshot hooks
    # ------------------------------------------------------------------

    def snapshot(self) -> Any:
        return copy.deepcopy(self.state), self.shares.snapshot(), list(self.events)

    def restore(self, snap: Any) -> None:
        state, shares, events = snap
        self.state = copy.deepcopy(state)
        self.shares.restore(shares)
        self.events[:] = events

    def __repr__(self) -> str:
        return f"SpaceLP(address={self.address!r}, {self.state!r})"

"""
SpaceRouter: user-facing entry points in front of the SpaceLP pool.

The router holds no state of its own. It pulls assets from the caller into
the pool, calls the pool's push-based functions and checks caller-supplied
bounds against what actually moved, so a taxed SPC transfer is accounted for.
"""

from __future__ import annotations

import logging
from typing import Tuple

from ..chain.chain import Chain
from ..config import RouterConfig
from ..errors import MinimumAmountOutNotMet, SuboptimalEthIn
from ..state.balances import Address, Amount
from .cpmm import optimal_deposit_eth
from .pool import SpaceLP
from .transfers import TokenLedger, safe_transfer_from, send_native


logger = logging.getLogger(__name__)


class SpaceRouter:
    def __init__(
        self,
        chain: Chain,
        pool: SpaceLP,
        token: TokenLedger,
        *,
        address: Address = "spacerouter",
        config: RouterConfig = RouterConfig(),
    ) -> None:
        self.chain = chain
        self.pool = pool
        self.token = token
        self.address = address
        self.config = config
        chain.register_contract(address)

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    def get_optimal_deposit_eth(self, spc_in: Amount) -> Amount:
        """
        ETH to pair with `spc_in` at the pool's current ratio.

        While the pool is empty the configured fallback ratio (1 ETH : 5 SPC by
        default) is used instead.
        """
        reserve_eth, reserve_spc = self.pool.get_reserves()
        return optimal_deposit_eth(spc_in, reserve_eth, reserve_spc, self.config)

    def get_maximum_spc_amount_out(self, eth_in: Amount) -> Amount:
        out = self.pool.get_maximum_amount_out(eth_in, is_eth_in=True)
        logger.debug("quote %d ETH -> %d SPC", eth_in, out)
        return out

    def get_maximum_eth_amount_out(self, spc_in: Amount) -> Amount:
        out = self.pool.get_maximum_amount_out(spc_in, is_eth_in=False)
        logger.debug("quote %d SPC -> %d ETH", spc_in, out)
        return out

    # ------------------------------------------------------------------
    # Liquidity
    # ------------------------------------------------------------------

    def add_liquidity(self, sender: Address, spc_in: Amount, *, value: Amount) -> Amount:
        """
        Deposit `spc_in` SPC (pulled via allowance) and `value` ETH into the pool.

        Once the pool holds liquidity, `value` must equal
        `get_optimal_deposit_eth(spc_in)`. If the transfer tax shortens the SPC
        that reaches the pool, the ETH forwarded is re-matched to what arrived
        and the surplus is refunded to `sender`.

        Returns:
            Shares minted to `sender`

        Raises:
            SuboptimalEthIn: If `value` does not match the current ratio
            InsufficientLiquidityMinted: If the deposit is worth zero shares
        """
        with self.chain.atomic():
            self.chain.pay(sender, self.address, value)
            reserve_eth, reserve_spc = self.pool.get_reserves()
            initialized = self.pool.state.is_initialized
            if initialized:
                optimal = optimal_deposit_eth(spc_in, reserve_eth, reserve_spc, self.config)
                if value != optimal:
                    raise SuboptimalEthIn(optimal, value)

            before = self.token.balance_of(self.pool.address)
            safe_transfer_from(self.token, self.address, sender, self.pool.address, spc_in)
            delivered = self.token.balance_of(self.pool.address) - before

            eth_forward = value
            if initialized and delivered < spc_in:
                eth_forward = min(value, optimal_deposit_eth(delivered, reserve_eth, reserve_spc, self.config))
                refund = value - eth_forward
                if refund:
                    send_native(self.chain, self.address, sender, refund)
                    logger.debug("refunded %d ETH to %s after taxed SPC delivery", refund, sender)

            minted = self.pool.deposit(self.address, sender, value=eth_forward)
            logger.info("add_liquidity sender=%s eth=%d spc=%d shares=%d", sender, eth_forward, delivered, minted)
            return minted

    def remove_liquidity(self, sender: Address, shares: Amount) -> Tuple[Amount, Amount]:
        """
        Pull `shares` (via allowance) into the pool and withdraw them to `sender`.

        Returns:
            Tuple of (eth_out, spc_out) paid by the pool
        """
        with self.chain.atomic():
            safe_transfer_from(self.pool.shares, self.address, sender, self.pool.address, shares)
            eth_out, spc_out = self.pool.withdraw(self.address, sender)
            logger.info("remove_liquidity sender=%s shares=%d eth=%d spc=%d", sender, shares, eth_out, spc_out)
            return eth_out, spc_out

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def swap_eth_for_spc(self, sender: Address, spc_out_min: Amount, *, value: Amount) -> Amount:
        """
        Swap `value` ETH for SPC.

        The bound is checked against the SPC `sender` actually received, after
        any transfer tax.

        Raises:
            MinimumAmountOutNotMet: If fewer than `spc_out_min` SPC arrived
        """
        with self.chain.atomic():
            self.chain.pay(sender, self.address, value)
            before = self.token.balance_of(sender)
            self.pool.swap(self.address, sender, True, value=value)
            received = self.token.balance_of(sender) - before
            if received < spc_out_min:
                raise MinimumAmountOutNotMet(spc_out_min, received)
            return received

    def swap_spc_for_eth(self, sender: Address, spc_in: Amount, eth_out_min: Amount) -> Amount:
        """
        Swap `spc_in` SPC (pulled via allowance) for ETH.

        Raises:
            MinimumAmountOutNotMet: If fewer than `eth_out_min` ETH arrived
        """
        with self.chain.atomic():
            before = self.chain.balance_of(sender)
            safe_transfer_from(self.token, self.address, sender, self.pool.address, spc_in)
            self.pool.swap(self.address, sender, False)
            received = self.chain.balance_of(sender) - before
            if received < eth_out_min:
                raise MinimumAmountOutNotMet(eth_out_min, received)
            return received

    def __repr__(self) -> str:
        return f"SpaceRouter(address={self.address!r}, pool={self.pool.address!r})"

"""
Outbound transfer helpers used by the pool and router.

Token ledgers report failure by returning False; these wrappers turn every
failed transfer into a typed error so the enclosing call reverts.
"""

from __future__ import annotations

from typing import Union

from ..chain.chain import Chain
from ..chain.token import SpaceCoin
from ..errors import EthTransferFailed, TokenTransferFailed
from ..state.balances import Address, Amount
from ..state.shares import ShareLedger


# Any ledger with balance_of, allowance, transfer and transfer_from returning bool.
TokenLedger = Union[SpaceCoin, ShareLedger]


def safe_transfer(token: TokenLedger, sender: Address, to: Address, amount: Amount) -> None:
    if not token.transfer(sender, to, amount):
        raise TokenTransferFailed(token.address, sender, to, amount)


def safe_transfer_from(
    token: TokenLedger,
    spender: Address,
    owner: Address,
    to: Address,
    amount: Amount,
) -> None:
    if not token.transfer_from(spender, owner, to, amount):
        raise TokenTransferFailed(token.address, owner, to, amount)


def send_native(chain: Chain, sender: Address, to: Address, amount: Amount) -> None:
    if not chain.send(sender, to, amount):
        raise EthTransferFailed(to, amount)

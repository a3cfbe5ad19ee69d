"""Events emitted by the pool. Reverted calls leave no events behind."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Union

from ..state.balances import Address, Amount


@dataclass(frozen=True)
class LiquidityAdded:
    provider: Address
    eth_in: Amount
    spc_in: Amount
    shares: Amount


@dataclass(frozen=True)
class LiquidityWithdrawn:
    provider: Address
    eth_out: Amount
    spc_out: Amount
    shares: Amount


@dataclass(frozen=True)
class Swapped:
    trader: Address
    eth_in: Amount
    spc_in: Amount
    eth_out: Amount
    spc_out: Amount


PoolEvent = Union[LiquidityAdded, LiquidityWithdrawn, Swapped]


def event_to_dict(event: PoolEvent) -> Dict[str, Any]:
    return {"event": type(event).__name__, **asdict(event)}

"""Exception types for the SpaceLP pool, router and ledgers.

Every failure aborts the whole call; the chain rolls back any state touched
inside the failing transaction (see ``Chain.atomic``).
"""

from __future__ import annotations


class SpaceLPError(Exception):
    """Base class for all typed failures raised by this package."""


# ---------------------------------------------------------------------------
# Liquidity insufficiency: a computed quantity is zero or reserves are empty.
# ---------------------------------------------------------------------------


class LiquidityError(SpaceLPError, ValueError):
    """A computed amount is zero or the pool cannot serve the request."""


class InsufficientLiquidityMinted(LiquidityError):
    def __init__(self) -> None:
        super().__init__("deposit would mint zero shares")


class InsufficientLiquidityBurned(LiquidityError):
    def __init__(self) -> None:
        super().__init__("withdrawal would pay out zero of an asset")


class InsufficientLiquidity(LiquidityError):
    def __init__(self) -> None:
        super().__init__("insufficient liquidity for the swap")


class InsufficientInputAmount(LiquidityError):
    def __init__(self) -> None:
        super().__init__("no input detected for the swap")


# ---------------------------------------------------------------------------
# Bound violations: caller-supplied constraints not met by market state.
# ---------------------------------------------------------------------------


class BoundViolationError(SpaceLPError):
    """A caller-supplied bound is not satisfied; retry with fresh parameters."""


class SuboptimalEthIn(BoundViolationError):
    def __init__(self, optimal_eth: int, eth_in: int) -> None:
        self.optimal_eth = optimal_eth
        self.eth_in = eth_in
        super().__init__(f"eth_in {eth_in} does not match optimal deposit {optimal_eth}")


class MinimumAmountOutNotMet(BoundViolationError):
    def __init__(self, min_out: int, actual_out: int) -> None:
        self.min_out = min_out
        self.actual_out = actual_out
        super().__init__(f"received {actual_out}, below minimum {min_out}")


# ---------------------------------------------------------------------------
# Concurrency and transfers.
# ---------------------------------------------------------------------------


class ReentrancyLockEngaged(SpaceLPError):
    """Raised when a mutating pool call re-enters while another is in flight."""

    def __init__(self) -> None:
        super().__init__("reentrancy lock engaged")


class TransferError(SpaceLPError):
    """An outbound asset transfer failed; the enclosing call is rolled back."""


class EthTransferFailed(TransferError):
    def __init__(self, to: str, amount: int) -> None:
        self.to = to
        self.amount = amount
        super().__init__(f"native transfer of {amount} to {to} failed")


class ReceiveRejected(TransferError):
    """Raised by the chain when a contract without a receive hook is sent native value."""

    def __init__(self, to: str) -> None:
        self.to = to
        super().__init__(f"contract {to} does not accept native transfers")


class TokenTransferFailed(TransferError):
    def __init__(self, token: str, sender: str, to: str, amount: int) -> None:
        self.token = token
        self.sender = sender
        self.to = to
        self.amount = amount
        super().__init__(f"token {token} transfer of {amount} from {sender} to {to} failed")


# ---------------------------------------------------------------------------
# Ledger errors raised by the token and share ledgers.
# ---------------------------------------------------------------------------


class LedgerError(SpaceLPError):
    """Raised by balance/allowance bookkeeping."""


class InsufficientBalance(LedgerError):
    def __init__(self, account: str, balance: int, amount: int) -> None:
        self.account = account
        self.balance = balance
        self.amount = amount
        super().__init__(f"transfer amount exceeds balance: {amount} > {balance} ({account})")


class InsufficientAllowance(LedgerError):
    def __init__(self, owner: str, spender: str, allowance: int, amount: int) -> None:
        self.owner = owner
        self.spender = spender
        self.allowance = allowance
        self.amount = amount
        super().__init__(f"insufficient allowance: {amount} > {allowance} ({owner} -> {spender})")


class Unauthorized(LedgerError):
    def __init__(self, caller: str) -> None:
        self.caller = caller
        super().__init__(f"caller {caller} is not authorized")


class FlagUnchanged(LedgerError):
    def __init__(self, flag: bool) -> None:
        self.flag = flag
        super().__init__(f"flag already set to {flag}")


class PoolInvariantError(SpaceLPError):
    """Raised when a pool state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")

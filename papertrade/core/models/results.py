"""
Typed operation results.

Ledger and limit-order calls return these instead of raising, so callers
can display the precise rejection reason directly.
"""

from dataclasses import dataclass

from papertrade.core.exceptions.simulation import SimulationException

from .limit_order import LimitOrder
from .transaction import Transaction


@dataclass(frozen=True)
class TradeResult:
    """Outcome of a buy or sell."""

    success: bool
    message: str
    transaction: Transaction | None = None
    error: str | None = None  # Exception class name on rejection

    @classmethod
    def ok(cls, transaction: Transaction, message: str) -> "TradeResult":
        """Build a successful result."""
        return cls(success=True, message=message, transaction=transaction)

    @classmethod
    def rejected(cls, error: SimulationException) -> "TradeResult":
        """Build a rejection from a domain exception."""
        return cls(success=False, message=str(error), error=type(error).__name__)


@dataclass(frozen=True)
class OrderResult:
    """Outcome of a limit order submission or cancellation."""

    success: bool
    message: str
    order: LimitOrder | None = None
    error: str | None = None

    @classmethod
    def ok(cls, order: LimitOrder, message: str) -> "OrderResult":
        """Build a successful result."""
        return cls(success=True, message=message, order=order)

    @classmethod
    def rejected(
        cls, error: SimulationException, order: LimitOrder | None = None
    ) -> "OrderResult":
        """Build a rejection from a domain exception."""
        return cls(success=False, message=str(error), order=order, error=type(error).__name__)

"""
Holding domain model.
"""

from dataclasses import dataclass

from papertrade.core.exceptions.simulation import ValidationError
from papertrade.core.types.financial import (
    ZERO,
    calculate_average_cost,
    calculate_realized_pnl,
    round_amount,
    round_percentage,
)


@dataclass
class Holding:
    """A portfolio's position in one symbol.

    The average cost basis is re-weighted on every buy and left unchanged
    on sells; a holding whose quantity reaches zero is removed by the ledger.
    """

    symbol: str
    quantity: int
    average_cost_basis: float

    def __post_init__(self) -> None:
        """Validate holding data after initialization."""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(f"Quantity must be an integer, got {self.quantity!r}")
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.average_cost_basis <= ZERO:
            raise ValidationError(
                f"Average cost basis must be positive, got {self.average_cost_basis}"
            )

    @property
    def total_cost_basis(self) -> float:
        """Total amount paid for the shares currently held."""
        return round_amount(self.quantity * self.average_cost_basis)

    def add(self, quantity: int, price: float) -> None:
        """Add shares bought at price, re-weighting the average cost."""
        self.average_cost_basis = calculate_average_cost(
            self.quantity, self.average_cost_basis, quantity, price
        )
        self.quantity += quantity

    def remove(self, quantity: int) -> int:
        """Remove sold shares; average cost is unchanged.

        Returns:
            Remaining quantity
        """
        if quantity > self.quantity:
            raise ValidationError(
                f"Cannot remove {quantity} shares of {self.symbol}, only {self.quantity} held"
            )
        self.quantity -= quantity
        return self.quantity

    def market_value(self, current_price: float) -> float:
        """Calculate value of the holding at current_price."""
        return round_amount(self.quantity * current_price)

    def unrealized_pnl(self, current_price: float) -> float:
        """Calculate paper gain or loss at current_price."""
        return round_amount(self.market_value(current_price) - self.total_cost_basis)

    def realized_pnl(self, sale_price: float, quantity: int) -> float:
        """Calculate gain or loss realized by selling quantity at sale_price."""
        return calculate_realized_pnl(self.average_cost_basis, sale_price, quantity)

    def details(self, current_price: float) -> dict:
        """Build a display-ready summary of the holding at current_price."""
        profit_loss = self.unrealized_pnl(current_price)
        cost = self.total_cost_basis
        return {
            "symbol": self.symbol,
            "quantity": self.quantity,
            "average_cost_basis": self.average_cost_basis,
            "total_cost_basis": cost,
            "current_price": current_price,
            "current_value": self.market_value(current_price),
            "unrealized_pnl": profit_loss,
            "percent_change": round_percentage(profit_loss / cost * 100) if cost > 0 else ZERO,
        }

    def to_dict(self) -> dict:
        """Convert holding to dictionary."""
        return {
            "symbol": self.symbol,
            "quantity": self.quantity,
            "average_cost_basis": self.average_cost_basis,
        }

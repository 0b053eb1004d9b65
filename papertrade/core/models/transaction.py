"""
Transaction domain model.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from papertrade.core.enums import TransactionType
from papertrade.core.exceptions.simulation import ValidationError
from papertrade.core.types.financial import ZERO, calculate_notional_value
from papertrade.core.utils.id_generation import generate_id


@dataclass(frozen=True)
class Transaction:
    """Represents an executed buy or sell. Immutable once created."""

    type: TransactionType
    symbol: str
    quantity: int
    price_per_unit: float
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    realized_pnl: float = ZERO
    id: str = field(default_factory=lambda: generate_id("txn"))

    def __post_init__(self) -> None:
        """Validate transaction data after initialization."""
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.price_per_unit <= 0:
            raise ValidationError(f"Price must be positive, got {self.price_per_unit}")

    @property
    def total_value(self) -> float:
        """Calculate quantity x price_per_unit."""
        return calculate_notional_value(self.quantity, self.price_per_unit)

    def to_dict(self) -> dict:
        """Convert transaction to dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "symbol": self.symbol,
            "quantity": self.quantity,
            "price_per_unit": self.price_per_unit,
            "total_value": self.total_value,
            "realized_pnl": self.realized_pnl,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Rebuild a transaction from its dictionary form."""
        return cls(
            id=data["id"],
            type=TransactionType.from_string(data["type"]),
            symbol=data["symbol"],
            quantity=int(data["quantity"]),
            price_per_unit=float(data["price_per_unit"]),
            realized_pnl=float(data.get("realized_pnl", ZERO)),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )

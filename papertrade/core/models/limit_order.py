"""
Limit order domain model.

Orders move from ACTIVE to exactly one terminal state; every transition
method refuses to leave a terminal state.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from papertrade.core.enums import OrderStatus, TransactionType
from papertrade.core.exceptions.simulation import OrderStateError
from papertrade.core.utils.id_generation import generate_id


def _parse_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


@dataclass
class LimitOrder:
    """A standing conditional instruction to buy or sell once price crosses target."""

    portfolio_id: str
    type: TransactionType
    symbol: str
    quantity: int
    target_price: float
    expiration: datetime | None = None
    status: OrderStatus = OrderStatus.ACTIVE
    id: str = field(default_factory=lambda: generate_id("order"))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    expired_at: datetime | None = None
    failed_at: datetime | None = None
    execution_price: float | None = None
    total_value: float | None = None
    fail_reason: str | None = None

    @property
    def is_active(self) -> bool:
        """Check if the order is still waiting for its trigger."""
        return self.status == OrderStatus.ACTIVE

    def is_expired(self, now: datetime) -> bool:
        """Check if the expiration has passed at now."""
        return self.expiration is not None and self.expiration < now

    def is_triggered(self, current_price: float) -> bool:
        """Check the price condition.

        Buy orders fire when target >= price; sell orders when target <= price.
        """
        if self.type == TransactionType.BUY:
            return self.target_price >= current_price
        return self.target_price <= current_price

    def _ensure_active(self, action: str) -> None:
        if self.status.is_terminal:
            raise OrderStateError(self.id, self.status.value, action)

    def complete(self, now: datetime, execution_price: float, total_value: float) -> None:
        """Transition to COMPLETED with execution details."""
        self._ensure_active("complete")
        self.status = OrderStatus.COMPLETED
        self.completed_at = now
        self.execution_price = execution_price
        self.total_value = total_value

    def cancel(self, now: datetime) -> None:
        """Transition to CANCELLED."""
        self._ensure_active("cancel")
        self.status = OrderStatus.CANCELLED
        self.cancelled_at = now

    def expire(self, now: datetime) -> None:
        """Transition to EXPIRED."""
        self._ensure_active("expire")
        self.status = OrderStatus.EXPIRED
        self.expired_at = now

    def fail(self, now: datetime, reason: str) -> None:
        """Transition to FAILED with a recorded reason."""
        self._ensure_active("fail")
        self.status = OrderStatus.FAILED
        self.failed_at = now
        self.fail_reason = reason

    def to_dict(self) -> dict:
        """Convert order to dictionary."""

        def iso(value: datetime | None) -> str | None:
            return value.isoformat() if value else None

        return {
            "id": self.id,
            "portfolio_id": self.portfolio_id,
            "type": self.type.value,
            "symbol": self.symbol,
            "quantity": self.quantity,
            "target_price": self.target_price,
            "expiration": iso(self.expiration),
            "status": self.status.value,
            "created_at": iso(self.created_at),
            "completed_at": iso(self.completed_at),
            "cancelled_at": iso(self.cancelled_at),
            "expired_at": iso(self.expired_at),
            "failed_at": iso(self.failed_at),
            "execution_price": self.execution_price,
            "total_value": self.total_value,
            "fail_reason": self.fail_reason,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LimitOrder":
        """Rebuild an order from its dictionary form."""
        return cls(
            id=data["id"],
            portfolio_id=data["portfolio_id"],
            type=TransactionType.from_string(data["type"]),
            symbol=data["symbol"],
            quantity=int(data["quantity"]),
            target_price=float(data["target_price"]),
            expiration=_parse_time(data.get("expiration")),
            status=OrderStatus(data.get("status", OrderStatus.ACTIVE.value)),
            created_at=_parse_time(data.get("created_at")) or datetime.now(UTC),
            completed_at=_parse_time(data.get("completed_at")),
            cancelled_at=_parse_time(data.get("cancelled_at")),
            expired_at=_parse_time(data.get("expired_at")),
            failed_at=_parse_time(data.get("failed_at")),
            execution_price=data.get("execution_price"),
            total_value=data.get("total_value"),
            fail_reason=data.get("fail_reason"),
        )

"""
Ledger snapshot exchanged with persistence collaborators.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LedgerSnapshot:
    """Serializable state of one user's ledger and limit orders."""

    portfolio_id: str
    cash_balance: float
    initial_balance: float
    holdings: list[dict[str, Any]] = field(default_factory=list)
    transactions: list[dict[str, Any]] = field(default_factory=list)
    limit_orders: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to dictionary."""
        return {
            "portfolio_id": self.portfolio_id,
            "cash_balance": self.cash_balance,
            "initial_balance": self.initial_balance,
            "holdings": list(self.holdings),
            "transactions": list(self.transactions),
            "limit_orders": list(self.limit_orders),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LedgerSnapshot":
        """Rebuild a snapshot from its dictionary form."""
        return cls(
            portfolio_id=data["portfolio_id"],
            cash_balance=float(data["cash_balance"]),
            initial_balance=float(data["initial_balance"]),
            holdings=list(data.get("holdings", [])),
            transactions=list(data.get("transactions", [])),
            limit_orders=list(data.get("limit_orders", [])),
        )

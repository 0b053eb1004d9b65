"""
Portfolio ledger interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

from papertrade.core.protocols import PriceLookup

if TYPE_CHECKING:
    from papertrade.core.models.portfolio_metrics import Valuation
    from papertrade.core.models.results import TradeResult


class IPortfolio(ABC):
    """Abstract interface for a cash-and-holdings ledger."""

    @property
    @abstractmethod
    def portfolio_id(self) -> str:
        """Get the unique portfolio id."""
        pass

    @abstractmethod
    def buy(
        self,
        symbol: str,
        quantity: int,
        price_lookup: PriceLookup,
        timestamp: datetime | None = None,
    ) -> "TradeResult":
        """Execute a buy at the current price."""
        pass

    @abstractmethod
    def sell(
        self,
        symbol: str,
        quantity: int,
        price_lookup: PriceLookup,
        timestamp: datetime | None = None,
    ) -> "TradeResult":
        """Execute a sell at the current price."""
        pass

    @abstractmethod
    def valuate(self, price_lookup: PriceLookup) -> "Valuation":
        """Recompute portfolio value, total assets and earnings."""
        pass

    @abstractmethod
    def reset(self, new_initial_balance: float) -> None:
        """Clear holdings and history and restart with a new balance."""
        pass

    @abstractmethod
    def held_quantity(self, symbol: str) -> int:
        """Get the number of shares currently held."""
        pass

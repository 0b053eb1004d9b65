"""
Portfolio metrics and calculations.

All values are recomputed on demand from the current holdings and a price
lookup; nothing here is cached or mutates the ledger.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from papertrade.core.protocols import PriceLookup
from papertrade.core.types.financial import ZERO, round_amount

if TYPE_CHECKING:
    from .portfolio_core import PortfolioCore


@dataclass(frozen=True)
class Valuation:
    """Point-in-time valuation of a portfolio."""

    cash_balance: float
    portfolio_value: float
    total_assets_value: float
    earnings: float
    unrealized_pnl: float
    realized_pnl: float

    def to_dict(self) -> dict[str, float]:
        """Convert valuation to dictionary."""
        return {
            "cash_balance": self.cash_balance,
            "portfolio_value": self.portfolio_value,
            "total_assets_value": self.total_assets_value,
            "earnings": self.earnings,
            "unrealized_pnl": self.unrealized_pnl,
            "realized_pnl": self.realized_pnl,
        }


class PortfolioMetrics:
    """Portfolio metrics calculations."""

    def __init__(self, portfolio_core: "PortfolioCore") -> None:
        """Initialize with portfolio core state."""
        self.core = portfolio_core

    def _current_price(self, symbol: str, price_lookup: PriceLookup) -> float:
        """Resolve a price, valuing unknown symbols at zero."""
        price = price_lookup(symbol)
        if price is None:
            logger.debug(f"No price for held symbol {symbol}; valuing at zero")
            return ZERO
        return price

    def calculate_portfolio_value(self, price_lookup: PriceLookup) -> float:
        """Sum quantity x current price over all holdings."""
        total = ZERO
        for symbol, holding in self.core.holdings.items():
            total += holding.market_value(self._current_price(symbol, price_lookup))
        return round_amount(total)

    def unrealized_pnl(self, price_lookup: PriceLookup) -> float:
        """Sum paper gain or loss over all holdings."""
        total = ZERO
        for symbol, holding in self.core.holdings.items():
            total += holding.unrealized_pnl(self._current_price(symbol, price_lookup))
        return round_amount(total)

    def valuate(self, price_lookup: PriceLookup) -> Valuation:
        """Build a valuation snapshot.

        Args:
            price_lookup: Current price source

        Returns:
            Valuation with portfolio value, total assets and earnings
        """
        with self.core._lock:
            portfolio_value = self.calculate_portfolio_value(price_lookup)
            cash = self.core.cash_balance
            total_assets = round_amount(cash + portfolio_value)
            return Valuation(
                cash_balance=cash,
                portfolio_value=portfolio_value,
                total_assets_value=total_assets,
                earnings=round_amount(total_assets - self.core.initial_balance),
                unrealized_pnl=self.unrealized_pnl(price_lookup),
                realized_pnl=round_amount(self.core.realized_pnl()),
            )

    def holding_details(self, price_lookup: PriceLookup) -> list[dict]:
        """Get per-holding detail rows at current prices."""
        with self.core._lock:
            return [
                holding.details(self._current_price(symbol, price_lookup))
                for symbol, holding in sorted(self.core.holdings.items())
            ]

"""
Main Portfolio class - orchestrates all ledger components.

This module provides the PortfolioLedger interface by composing the focused
components: core state, trading operations and metrics.
"""

from datetime import datetime

from papertrade.core.constants import DEFAULT_INITIAL_BALANCE, MAX_ORDER_QUANTITY
from papertrade.core.enums import TransactionType
from papertrade.core.exceptions.simulation import SimulationException
from papertrade.core.interfaces.portfolio import IPortfolio
from papertrade.core.models.holding import Holding
from papertrade.core.models.snapshot import LedgerSnapshot
from papertrade.core.models.transaction import Transaction
from papertrade.core.protocols import PriceLookup
from papertrade.core.utils.decorators import log_ledger_operation
from papertrade.core.utils.id_generation import generate_id

from .portfolio_core import PortfolioCore
from .portfolio_metrics import PortfolioMetrics, Valuation
from .portfolio_trading import PortfolioTrading
from .results import TradeResult
from .transaction_history import TransactionHistory


class Portfolio(IPortfolio):
    """Main Portfolio implementation.

    Orchestrates ledger operations by composing focused components:
    - PortfolioCore: State and per-portfolio lock
    - PortfolioTrading: Buy/sell execution
    - PortfolioMetrics: Valuation and P&L

    Rejections are returned as TradeResults, never raised.
    """

    def __init__(
        self,
        initial_balance: float = DEFAULT_INITIAL_BALANCE,
        cash_balance: float | None = None,
        holdings: dict[str, Holding] | None = None,
        transactions: list[Transaction] | None = None,
        portfolio_id: str | None = None,
        max_order_quantity: int = MAX_ORDER_QUANTITY,
    ) -> None:
        """Initialize Portfolio with composition pattern."""
        self._core = PortfolioCore(
            portfolio_id=portfolio_id or generate_id("port"),
            initial_balance=float(initial_balance),
            cash_balance=float(initial_balance if cash_balance is None else cash_balance),
            holdings=dict(holdings or {}),
            transactions=list(transactions or []),
        )
        self._trading = PortfolioTrading(self._core, max_order_quantity)
        self._metrics = PortfolioMetrics(self._core)

    @property
    def portfolio_id(self) -> str:
        """Get the portfolio id."""
        return self._core.portfolio_id

    @property
    def cash_balance(self) -> float:
        """Get current cash (delegates to core)."""
        return self._core.cash_balance

    @property
    def initial_balance(self) -> float:
        """Get the starting balance (delegates to core)."""
        return self._core.initial_balance

    @property
    def holdings(self) -> dict[str, Holding]:
        """Get a shallow copy of current holdings."""
        with self._core._lock:
            return dict(self._core.holdings)

    @property
    def transaction_history(self) -> tuple[Transaction, ...]:
        """Get the transaction log in execution order."""
        with self._core._lock:
            return tuple(self._core.transactions)

    @property
    def lock(self):
        """Get the per-portfolio lock serializing all mutation."""
        return self._core._lock

    # Core Portfolio Interface (IPortfolio)
    @log_ledger_operation
    def buy(
        self,
        symbol: str,
        quantity: int,
        price_lookup: PriceLookup,
        timestamp: datetime | None = None,
    ) -> TradeResult:
        """Execute a buy order stamped with timestamp."""
        try:
            transaction = self._trading.buy(symbol, quantity, price_lookup, timestamp)
        except SimulationException as e:
            return TradeResult.rejected(e)
        return TradeResult.ok(
            transaction,
            f"Bought {transaction.quantity} {transaction.symbol} "
            f"at ${transaction.price_per_unit:,.2f}",
        )

    @log_ledger_operation
    def sell(
        self,
        symbol: str,
        quantity: int,
        price_lookup: PriceLookup,
        timestamp: datetime | None = None,
    ) -> TradeResult:
        """Execute a sell order stamped with timestamp."""
        try:
            transaction = self._trading.sell(symbol, quantity, price_lookup, timestamp)
        except SimulationException as e:
            return TradeResult.rejected(e)
        return TradeResult.ok(
            transaction,
            f"Sold {transaction.quantity} {transaction.symbol} "
            f"at ${transaction.price_per_unit:,.2f}",
        )

    def valuate(self, price_lookup: PriceLookup) -> Valuation:
        """Recompute valuation from current holdings."""
        return self._metrics.valuate(price_lookup)

    @log_ledger_operation
    def reset(self, new_initial_balance: float) -> None:
        """Clear holdings and history and restore cash to new_initial_balance."""
        self._core.clear(float(new_initial_balance))

    def held_quantity(self, symbol: str) -> int:
        """Get shares held for symbol."""
        with self._core._lock:
            return self._core.held_quantity(symbol.upper())

    # Additional utility methods
    def realized_pnl(self) -> float:
        """Calculate total realized PnL from sells."""
        return self._core.realized_pnl()

    def holding_details(self, price_lookup: PriceLookup) -> list[dict]:
        """Get per-holding P&L rows."""
        return self._metrics.holding_details(price_lookup)

    def transactions(
        self, symbol: str | None = None, transaction_type: TransactionType | None = None
    ) -> TransactionHistory:
        """Get a restartable, filterable view of the transaction log."""
        return TransactionHistory(
            lambda: list(self.transaction_history), symbol, transaction_type
        )

    def snapshot(self) -> LedgerSnapshot:
        """Capture the ledger state for persistence."""
        with self._core._lock:
            return LedgerSnapshot(
                portfolio_id=self._core.portfolio_id,
                cash_balance=self._core.cash_balance,
                initial_balance=self._core.initial_balance,
                holdings=[h.to_dict() for h in self._core.holdings.values()],
                transactions=[t.to_dict() for t in self._core.transactions],
            )

    @classmethod
    def from_snapshot(
        cls, snapshot: LedgerSnapshot, max_order_quantity: int = MAX_ORDER_QUANTITY
    ) -> "Portfolio":
        """Rebuild a portfolio from a persisted snapshot."""
        holdings = {
            data["symbol"]: Holding(
                symbol=data["symbol"],
                quantity=int(data["quantity"]),
                average_cost_basis=float(data["average_cost_basis"]),
            )
            for data in snapshot.holdings
        }
        return cls(
            initial_balance=snapshot.initial_balance,
            cash_balance=snapshot.cash_balance,
            holdings=holdings,
            transactions=[Transaction.from_dict(t) for t in snapshot.transactions],
            portfolio_id=snapshot.portfolio_id,
            max_order_quantity=max_order_quantity,
        )

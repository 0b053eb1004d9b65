"""
Portfolio trading operations.

This module handles buy/sell execution against the ledger. Every check
runs before the first mutation, so a rejected order leaves cash, holdings
and the transaction log untouched.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from papertrade.core.constants import MAX_ORDER_QUANTITY
from papertrade.core.enums import TransactionType
from papertrade.core.exceptions.simulation import InsufficientSharesError
from papertrade.core.models.holding import Holding
from papertrade.core.models.transaction import Transaction
from papertrade.core.protocols import PriceLookup
from papertrade.core.types.financial import calculate_notional_value, round_amount

from .portfolio_helpers import OrderValidator, TradeRecorder

if TYPE_CHECKING:
    from .portfolio_core import PortfolioCore


class PortfolioTrading:
    """Portfolio trading operations.

    Raises domain exceptions on rejection; the Portfolio facade turns them
    into TradeResults.
    """

    def __init__(self, portfolio_core: "PortfolioCore", max_order_quantity: int = MAX_ORDER_QUANTITY):
        """Initialize with portfolio core state.

        Args:
            portfolio_core: The ledger state to execute trades against
            max_order_quantity: Per-order share cap for buys
        """
        self.core = portfolio_core
        self.max_order_quantity = max_order_quantity

    def buy(
        self,
        symbol: str,
        quantity: int,
        price_lookup: PriceLookup,
        timestamp: datetime | None = None,
    ) -> Transaction:
        """Execute a buy at the current price.

        Args:
            symbol: Ticker to buy
            quantity: Whole number of shares
            price_lookup: Current price source
            timestamp: Execution time; defaults to the wall clock

        Returns:
            The BUY transaction appended to the log

        Raises:
            ValidationError: Malformed quantity or symbol, or quantity above the cap
            UnknownSymbolError: Symbol has no price
            InsufficientFundsError: Cost exceeds cash
        """
        symbol, quantity = OrderValidator.validate_order(symbol, quantity, self.max_order_quantity)

        with self.core._lock:
            price = OrderValidator.resolve_price(symbol, price_lookup)
            cost = calculate_notional_value(quantity, price)
            OrderValidator.check_sufficient_funds(
                cost, self.core.cash_balance, f"buying {quantity} {symbol} at {price:.2f}"
            )

            transaction = TradeRecorder.create_transaction(
                TransactionType.BUY, symbol, quantity, price, timestamp=timestamp
            )

            self.core.cash_balance = round_amount(self.core.cash_balance - cost)
            self._add_to_holding(symbol, quantity, price)
            self.core.transactions.append(transaction)
            return transaction

    def sell(
        self,
        symbol: str,
        quantity: int,
        price_lookup: PriceLookup,
        timestamp: datetime | None = None,
    ) -> Transaction:
        """Execute a sell at the current price.

        Args:
            symbol: Ticker to sell
            quantity: Whole number of shares
            price_lookup: Current price source
            timestamp: Execution time; defaults to the wall clock

        Returns:
            The SELL transaction appended to the log

        Raises:
            ValidationError: Malformed quantity or symbol
            InsufficientSharesError: No holding, or fewer shares held than requested
            UnknownSymbolError: Symbol has no price
        """
        symbol, quantity = OrderValidator.validate_order(symbol, quantity, max_quantity=None)

        with self.core._lock:
            holding = self.core.holdings.get(symbol)
            if holding is None:
                raise InsufficientSharesError(symbol=symbol, requested=quantity, held=0)
            OrderValidator.check_sufficient_shares(symbol, quantity, holding.quantity)

            price = OrderValidator.resolve_price(symbol, price_lookup)
            proceeds = calculate_notional_value(quantity, price)
            transaction = TradeRecorder.create_transaction(
                TransactionType.SELL,
                symbol,
                quantity,
                price,
                realized_pnl=holding.realized_pnl(price, quantity),
                timestamp=timestamp,
            )

            self.core.cash_balance = round_amount(self.core.cash_balance + proceeds)
            if holding.remove(quantity) == 0:
                del self.core.holdings[symbol]
            self.core.transactions.append(transaction)
            return transaction

    def _add_to_holding(self, symbol: str, quantity: int, price: float) -> None:
        """Create or re-average the holding for symbol."""
        existing = self.core.holdings.get(symbol)
        if existing is None:
            self.core.holdings[symbol] = Holding(
                symbol=symbol, quantity=quantity, average_cost_basis=price
            )
        else:
            existing.add(quantity, price)

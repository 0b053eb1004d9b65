"""
Unit tests for the Portfolio ledger.
"""

import threading
from datetime import UTC, datetime

import pytest

from papertrade.core.enums import TransactionType
from papertrade.core.exceptions.simulation import ValidationError
from papertrade.core.models.holding import Holding
from papertrade.core.models.portfolio import Portfolio


class PriceBoard:
    """Mutable price lookup for tests."""

    def __init__(self, **prices: float) -> None:
        self.prices = dict(prices)

    def __call__(self, symbol: str) -> float | None:
        return self.prices.get(symbol)


class TestPortfolioBasics:
    """Basic ledger state tests."""

    def test_should_create_portfolio_with_initial_balance(self) -> None:
        """Test a new portfolio starts all-cash."""
        portfolio = Portfolio(initial_balance=500.0)

        assert portfolio.cash_balance == 500.0
        assert portfolio.initial_balance == 500.0
        assert portfolio.holdings == {}
        assert portfolio.transaction_history == ()
        assert portfolio.portfolio_id.startswith("port-")

    def test_should_reject_non_positive_initial_balance(self) -> None:
        """Test opening balance validation."""
        with pytest.raises(ValidationError, match="Initial balance must be positive"):
            Portfolio(initial_balance=0)


class TestPortfolioBuy:
    """Test suite for buy execution."""

    def test_should_buy_and_deduct_cash(self) -> None:
        """Test a successful buy."""
        # Arrange
        portfolio = Portfolio(initial_balance=500.0)
        prices = PriceBoard(AAPL=149.0)

        # Act
        result = portfolio.buy("AAPL", 3, prices)

        # Assert
        assert result.success
        assert result.transaction.type == TransactionType.BUY
        assert result.transaction.total_value == 447.0
        assert portfolio.cash_balance == 53.0
        assert portfolio.held_quantity("aapl") == 3
        assert "Bought 3 AAPL" in result.message

    def test_should_stamp_trades_with_given_time(self) -> None:
        """Test buy and sell record the execution time they are given."""
        # Arrange
        portfolio = Portfolio(initial_balance=500.0)
        prices = PriceBoard(AAPL=100.0)
        executed_at = datetime(2024, 1, 1, 9, 45, tzinfo=UTC)

        # Act
        bought = portfolio.buy("AAPL", 2, prices, timestamp=executed_at)
        sold = portfolio.sell("AAPL", 1, prices, timestamp=executed_at)

        # Assert
        assert bought.transaction.timestamp == executed_at
        assert sold.transaction.timestamp == executed_at

    def test_should_re_average_cost_basis(self) -> None:
        """Test 10 @ 100 then 10 @ 200 gives quantity 20 at 150."""
        # Arrange
        portfolio = Portfolio(initial_balance=10000.0)
        prices = PriceBoard(AAPL=100.0)

        # Act
        portfolio.buy("AAPL", 10, prices)
        prices.prices["AAPL"] = 200.0
        portfolio.buy("AAPL", 10, prices)

        # Assert
        holding = portfolio.holdings["AAPL"]
        assert holding.quantity == 20
        assert holding.average_cost_basis == 150.0

    def test_should_reject_insufficient_funds_without_mutation(self) -> None:
        """Test a buy costing more than cash leaves state unchanged."""
        # Arrange
        portfolio = Portfolio(initial_balance=500.0)
        prices = PriceBoard(AAPL=200.0)

        # Act
        result = portfolio.buy("AAPL", 3, prices)

        # Assert
        assert not result.success
        assert "insufficient" in result.message.lower()
        assert result.error == "InsufficientFundsError"
        assert portfolio.cash_balance == 500.0
        assert portfolio.holdings == {}
        assert portfolio.transaction_history == ()

    def test_should_reject_unknown_symbol(self) -> None:
        """Test a symbol without a price is rejected."""
        portfolio = Portfolio(initial_balance=500.0)

        result = portfolio.buy("ZZZ", 1, PriceBoard(AAPL=10.0))

        assert not result.success
        assert result.error == "UnknownSymbolError"
        assert "unknown symbol" in result.message.lower()

    @pytest.mark.parametrize("quantity", [0, -1, 2.5, "abc", 101])
    def test_should_reject_invalid_quantities(self, quantity: object) -> None:
        """Test quantity must be a positive integer within the cap."""
        portfolio = Portfolio(initial_balance=100000.0)

        result = portfolio.buy("AAPL", quantity, PriceBoard(AAPL=1.0))

        assert not result.success
        assert result.error == "ValidationError"
        assert "quantity must" in result.message
        assert portfolio.cash_balance == 100000.0

    def test_should_accept_numeric_string_quantity(self) -> None:
        """Test integral strings are coerced."""
        portfolio = Portfolio(initial_balance=500.0)

        result = portfolio.buy("AAPL", "2", PriceBoard(AAPL=10.0))

        assert result.success
        assert portfolio.held_quantity("AAPL") == 2


class TestPortfolioSell:
    """Test suite for sell execution."""

    @pytest.fixture
    def funded(self) -> tuple[Portfolio, PriceBoard]:
        """Portfolio holding 10 AAPL bought at 100."""
        portfolio = Portfolio(initial_balance=2000.0)
        prices = PriceBoard(AAPL=100.0)
        portfolio.buy("AAPL", 10, prices)
        return portfolio, prices

    def test_should_round_trip_cash(self, funded: tuple[Portfolio, PriceBoard]) -> None:
        """Test buy then sell at the same price restores cash and clears holdings."""
        portfolio, prices = funded

        result = portfolio.sell("AAPL", 10, prices)

        assert result.success
        assert result.transaction.type == TransactionType.SELL
        assert portfolio.cash_balance == 2000.0
        assert "AAPL" not in portfolio.holdings
        assert len(portfolio.transaction_history) == 2

    def test_should_record_realized_pnl_and_keep_average(
        self, funded: tuple[Portfolio, PriceBoard]
    ) -> None:
        """Test a partial sell keeps the average cost and books realized PnL."""
        # Arrange
        portfolio, prices = funded
        prices.prices["AAPL"] = 120.0

        # Act
        result = portfolio.sell("AAPL", 4, prices)

        # Assert
        assert result.transaction.realized_pnl == 80.0
        assert portfolio.holdings["AAPL"].quantity == 6
        assert portfolio.holdings["AAPL"].average_cost_basis == 100.0
        assert portfolio.realized_pnl() == 80.0
        assert portfolio.cash_balance == 1480.0

    def test_should_reject_selling_more_than_held(
        self, funded: tuple[Portfolio, PriceBoard]
    ) -> None:
        """Test the sell guard leaves holdings untouched."""
        portfolio, prices = funded

        result = portfolio.sell("AAPL", 11, prices)

        assert not result.success
        assert "insufficient shares" in result.message.lower()
        assert portfolio.holdings["AAPL"].quantity == 10
        assert portfolio.cash_balance == 1000.0

    def test_should_reject_selling_unheld_symbol(self) -> None:
        """Test selling without a holding."""
        portfolio = Portfolio(initial_balance=500.0)

        result = portfolio.sell("MSFT", 1, PriceBoard(MSFT=10.0))

        assert not result.success
        assert result.error == "InsufficientSharesError"


class TestPortfolioValuation:
    """Test suite for valuation and reset."""

    def test_should_valuate_holdings_at_current_prices(self) -> None:
        """Test portfolio value, total assets and earnings."""
        # Arrange
        portfolio = Portfolio(initial_balance=1000.0)
        prices = PriceBoard(AAPL=100.0, MSFT=50.0)
        portfolio.buy("AAPL", 5, prices)
        portfolio.buy("MSFT", 4, prices)
        prices.prices.update(AAPL=110.0, MSFT=40.0)

        # Act
        valuation = portfolio.valuate(prices)

        # Assert
        assert valuation.cash_balance == 300.0
        assert valuation.portfolio_value == 710.0
        assert valuation.total_assets_value == 1010.0
        assert valuation.earnings == 10.0
        assert valuation.unrealized_pnl == 10.0
        assert valuation.realized_pnl == 0.0

    def test_should_value_unknown_prices_at_zero(self) -> None:
        """Test a holding whose price disappeared contributes nothing."""
        portfolio = Portfolio(initial_balance=1000.0)
        prices = PriceBoard(AAPL=100.0)
        portfolio.buy("AAPL", 5, prices)

        valuation = portfolio.valuate(PriceBoard())

        assert valuation.portfolio_value == 0.0
        assert valuation.total_assets_value == 500.0

    def test_should_reset_portfolio(self) -> None:
        """Test reset clears holdings and history and restores cash."""
        portfolio = Portfolio(initial_balance=1000.0)
        portfolio.buy("AAPL", 5, PriceBoard(AAPL=100.0))

        portfolio.reset(2500.0)

        assert portfolio.cash_balance == 2500.0
        assert portfolio.initial_balance == 2500.0
        assert portfolio.holdings == {}
        assert portfolio.transaction_history == ()

    def test_should_reject_non_positive_reset_balance(self) -> None:
        """Test reset validation."""
        portfolio = Portfolio(initial_balance=1000.0)

        with pytest.raises(ValidationError):
            portfolio.reset(0.0)
        assert portfolio.cash_balance == 1000.0

    def test_should_list_holding_details(self) -> None:
        """Test per-holding P&L rows."""
        portfolio = Portfolio(initial_balance=1000.0)
        prices = PriceBoard(AAPL=100.0)
        portfolio.buy("AAPL", 2, prices)
        prices.prices["AAPL"] = 125.0

        details = portfolio.holding_details(prices)

        assert details[0]["symbol"] == "AAPL"
        assert details[0]["unrealized_pnl"] == 50.0
        assert details[0]["percent_change"] == 25.0


class TestTransactionHistory:
    """Test suite for the transaction history view."""

    def test_should_filter_by_symbol_and_type(self) -> None:
        """Test filtered, restartable iteration."""
        # Arrange
        portfolio = Portfolio(initial_balance=5000.0)
        prices = PriceBoard(AAPL=100.0, MSFT=50.0)
        portfolio.buy("AAPL", 5, prices)
        portfolio.buy("MSFT", 5, prices)
        portfolio.sell("AAPL", 2, prices)

        # Act
        history = portfolio.transactions(symbol="aapl")

        # Assert
        assert [t.type for t in history] == [TransactionType.BUY, TransactionType.SELL]
        assert len(list(history)) == 2
        assert len(list(history.filter(transaction_type=TransactionType.SELL))) == 1

    def test_should_reflect_new_transactions_on_next_iteration(self) -> None:
        """Test the view is live between iterations."""
        portfolio = Portfolio(initial_balance=5000.0)
        prices = PriceBoard(AAPL=100.0)
        history = portfolio.transactions()

        assert list(history) == []
        portfolio.buy("AAPL", 1, prices)
        assert len(list(history)) == 1


class TestPortfolioSnapshot:
    """Test suite for snapshot conversion."""

    def test_should_restore_from_snapshot(self) -> None:
        """Test snapshot then from_snapshot preserves ledger state."""
        # Arrange
        portfolio = Portfolio(initial_balance=1000.0)
        prices = PriceBoard(AAPL=100.0)
        portfolio.buy("AAPL", 3, prices)

        # Act
        restored = Portfolio.from_snapshot(portfolio.snapshot())

        # Assert
        assert restored.portfolio_id == portfolio.portfolio_id
        assert restored.cash_balance == 700.0
        assert restored.holdings["AAPL"] == Holding("AAPL", 3, 100.0)
        assert restored.transaction_history == portfolio.transaction_history


class TestPortfolioConcurrency:
    """Test suite for serialized mutation."""

    def test_should_never_overdraw_under_concurrent_buys(self) -> None:
        """Test concurrent buys cannot push cash below zero."""
        # Arrange
        portfolio = Portfolio(initial_balance=1000.0)
        prices = PriceBoard(AAPL=100.0)

        # Act
        threads = [
            threading.Thread(target=portfolio.buy, args=("AAPL", 1, prices)) for _ in range(25)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert portfolio.cash_balance == 0.0
        assert portfolio.held_quantity("AAPL") == 10

"""Helper methods for Portfolio to reduce complexity."""

import math
from datetime import UTC, datetime

from papertrade.core.constants import MAX_INITIAL_BALANCE, MAX_ORDER_QUANTITY
from papertrade.core.enums import TransactionType
from papertrade.core.exceptions.simulation import (
    InsufficientFundsError,
    InsufficientSharesError,
    UnknownSymbolError,
    ValidationError,
)
from papertrade.core.models.transaction import Transaction
from papertrade.core.protocols import PriceLookup
from papertrade.core.types.financial import ZERO
from papertrade.core.utils.validation import validate_price, validate_quantity, validate_symbol


class PortfolioValidator:
    """Centralized validation helper for portfolio state."""

    @staticmethod
    def validate_initial_balance(balance: float) -> float:
        """Validate a starting balance.

        Raises:
            ValidationError: If balance is not a finite positive amount within limits
        """
        if not isinstance(balance, int | float) or not math.isfinite(balance):
            raise ValidationError(f"Initial balance must be a finite number, got {balance!r}")
        if balance <= 0:
            raise ValidationError(f"Initial balance must be positive, got {balance}")
        if balance > MAX_INITIAL_BALANCE:
            raise ValidationError(
                f"Initial balance too large: {balance} > {MAX_INITIAL_BALANCE}"
            )
        return balance

    @staticmethod
    def validate_cash_balance(cash: float) -> float:
        """Validate that cash is non-negative.

        Raises:
            ValidationError: If cash is negative or not finite
        """
        if not isinstance(cash, int | float) or not math.isfinite(cash) or cash < ZERO:
            raise ValidationError(f"Cash balance must be non-negative, got {cash!r}")
        return cash


class OrderValidator:
    """Validates market order parameters."""

    @staticmethod
    def validate_order(
        symbol: object, quantity: object, max_quantity: int | None = MAX_ORDER_QUANTITY
    ) -> tuple[str, int]:
        """Validate and normalize order parameters.

        Raises:
            ValidationError: If symbol or quantity is malformed
        """
        symbol = validate_symbol(symbol)
        quantity = validate_quantity(quantity, "quantity", max_quantity)
        return symbol, quantity

    @staticmethod
    def resolve_price(symbol: str, price_lookup: PriceLookup) -> float:
        """Look up the current price for symbol.

        Raises:
            UnknownSymbolError: If the lookup does not know the symbol
            ValidationError: If the returned price is unusable
        """
        price = price_lookup(symbol)
        if price is None:
            raise UnknownSymbolError(symbol)
        return validate_price(price, f"price of {symbol}")

    @staticmethod
    def check_sufficient_funds(cost: float, available: float, operation: str) -> None:
        """Check if sufficient cash is available."""
        if cost > available:
            raise InsufficientFundsError(required=cost, available=available, operation=operation)

    @staticmethod
    def check_sufficient_shares(symbol: str, requested: int, held: int) -> None:
        """Check if enough shares are held to sell."""
        if held < requested:
            raise InsufficientSharesError(symbol=symbol, requested=requested, held=held)


class TradeRecorder:
    """Creates transaction records."""

    @staticmethod
    def create_transaction(
        transaction_type: TransactionType,
        symbol: str,
        quantity: int,
        price: float,
        realized_pnl: float = ZERO,
        timestamp: datetime | None = None,
    ) -> Transaction:
        """Create a transaction record stamped with timestamp, or the current time."""
        return Transaction(
            type=transaction_type,
            symbol=symbol,
            quantity=quantity,
            price_per_unit=price,
            timestamp=timestamp or datetime.now(UTC),
            realized_pnl=realized_pnl,
        )

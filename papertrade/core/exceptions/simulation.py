"""
Custom exception hierarchy for the market simulator.

This module defines domain-specific exceptions for better error handling.
Ledger and limit-order operations translate these into typed results;
only persistence failures are raised to callers.
"""


class SimulationException(Exception):
    """Base exception for all simulator errors."""

    pass


class ValidationError(SimulationException):
    """Raised when input validation fails."""

    pass


class UnknownSymbolError(ValidationError):
    """Raised when a symbol is not part of the simulated market."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unknown symbol: {symbol}")


class ConfigurationError(SimulationException):
    """Raised when configuration is invalid."""

    pass


class PortfolioError(SimulationException):
    """Raised when portfolio operations fail."""

    pass


class InsufficientFundsError(PortfolioError):
    """Raised when there are insufficient funds for an operation."""

    def __init__(self, required: float, available: float, operation: str = "operation"):
        self.required = required
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}: required={required:.2f}, available={available:.2f}"
        )


class InsufficientSharesError(PortfolioError):
    """Raised when selling more shares than are held."""

    def __init__(self, symbol: str, requested: int, held: int):
        self.symbol = symbol
        self.requested = requested
        self.held = held
        super().__init__(f"Insufficient shares of {symbol}: requested={requested}, held={held}")


class PortfolioNotFoundError(PortfolioError):
    """Raised when a portfolio id is not registered with the session."""

    def __init__(self, portfolio_id: str):
        self.portfolio_id = portfolio_id
        super().__init__(f"Portfolio not found: {portfolio_id}")


class OrderError(SimulationException):
    """Raised when limit order operations fail."""

    pass


class OrderNotFoundError(OrderError):
    """Raised when a limit order id is unknown."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Limit order not found: {order_id}")


class OrderStateError(OrderError):
    """Raised when an order transition is not allowed from its current status."""

    def __init__(self, order_id: str, status: str, action: str):
        self.order_id = order_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} order {order_id}: order is {status}, not active")


class ExternalServiceError(SimulationException):
    """Raised when the external headline generator is unreachable or misbehaves."""

    pass


class PersistenceError(SimulationException):
    """Raised when loading or saving ledger state fails."""

    def __init__(self, user_key: str, operation: str, reason: str):
        self.user_key = user_key
        self.operation = operation
        self.reason = reason
        super().__init__(f"Persistence {operation} failed for {user_key}: {reason}")


class InstrumentCorruptError(SimulationException):
    """Raised when an instrument holds non-finite state and cannot be advanced."""

    def __init__(self, symbol: str, detail: str):
        self.symbol = symbol
        self.detail = detail
        super().__init__(f"Instrument {symbol} is corrupt: {detail}")

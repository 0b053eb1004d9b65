"""
Pydantic schemas for API request/response models.

Request models are the validation boundary for loosely typed client input:
numeric strings are coerced, malformed values are rejected with 422.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from papertrade.core.constants import (
    DEFAULT_INITIAL_BALANCE,
    DEFAULT_VOLATILITY,
    LIMIT_ORDER_MAX_QUANTITY,
    LIMIT_ORDER_MIN_QUANTITY,
    MAX_INITIAL_BALANCE,
)
from papertrade.core.enums import EventFrequency, MarketVolatility, TransactionType

SYMBOL_PATTERN = r"^[A-Za-z]{1,5}$"


class PortfolioCreateRequest(BaseModel):
    """Request model for opening a portfolio."""

    initial_balance: float = Field(
        default=DEFAULT_INITIAL_BALANCE, gt=0, le=MAX_INITIAL_BALANCE, description="Starting cash"
    )


class ResetRequest(BaseModel):
    """Request model for resetting a portfolio."""

    new_initial_balance: float | None = Field(
        default=None, gt=0, le=MAX_INITIAL_BALANCE, description="New starting cash"
    )


class TradeRequest(BaseModel):
    """Request model for a market buy or sell."""

    symbol: str = Field(..., pattern=SYMBOL_PATTERN, description="Ticker symbol")
    quantity: int = Field(..., gt=0, description="Number of shares")

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Upper-case the symbol."""
        return v.upper()


class LimitOrderRequest(BaseModel):
    """Request model for a limit order submission."""

    type: TransactionType = Field(..., description="BUY or SELL")
    symbol: str = Field(..., pattern=SYMBOL_PATTERN, description="Ticker symbol")
    quantity: int = Field(
        ..., ge=LIMIT_ORDER_MIN_QUANTITY, le=LIMIT_ORDER_MAX_QUANTITY, description="Shares"
    )
    target_price: float = Field(..., gt=0, description="Trigger price")
    expiration: datetime | None = Field(default=None, description="Optional expiry time")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept buy/sell in any case."""
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Upper-case the symbol."""
        return v.upper()


class CustomInstrumentRequest(BaseModel):
    """Request model for adding a user-defined instrument."""

    symbol: str = Field(..., pattern=SYMBOL_PATTERN, description="Ticker symbol")
    company_name: str | None = Field(default=None, max_length=100)
    sector: str | None = Field(default=None, max_length=50)
    market_price: float | None = Field(default=None, gt=0)
    volatility: float = Field(default=DEFAULT_VOLATILITY, ge=0.0, le=1.0)


class SettingsRequest(BaseModel):
    """Request model for market settings."""

    market_volatility: MarketVolatility | None = None
    event_frequency: EventFrequency | None = None


class TradeResponse(BaseModel):
    """Response model for a market buy or sell."""

    success: bool
    message: str
    error: str | None = None
    transaction: dict | None = None


class OrderResponse(BaseModel):
    """Response model for a limit order submission or cancellation."""

    success: bool
    message: str
    error: str | None = None
    order: dict | None = None


class PortfolioResponse(BaseModel):
    """Response model for portfolio state."""

    portfolio_id: str
    cash_balance: float
    initial_balance: float
    valuation: dict
    holdings: list[dict]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: dict | None = None

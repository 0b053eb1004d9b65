"""
Instrument domain model.

A simulated tradable symbol with a price, volatility, sentiment and a
bounded price history. Only the PriceModel and SentimentEngine mutate it.
"""

import random
from collections import deque
from dataclasses import dataclass, field

import numpy as np

from papertrade.core.constants import (
    BACKFILL_HISTORY_POINTS,
    DEFAULT_SECTORS,
    DEFAULT_VOLATILITY,
    PRICE_FLOOR,
    PRICE_HISTORY_CAP,
    SENTIMENT_MAX,
    SENTIMENT_MIN,
    TRADING_DAYS_PER_YEAR,
)
from papertrade.core.exceptions.simulation import InstrumentCorruptError, ValidationError
from papertrade.core.types.financial import (
    ZERO,
    clamp,
    is_finite_number,
    round_percentage,
    round_price,
)
from papertrade.core.utils.validation import validate_symbol


@dataclass
class Instrument:
    """Represents one simulated instrument.

    Price history is a deque capped at PRICE_HISTORY_CAP entries; appending
    past the cap evicts the oldest price.
    """

    symbol: str
    company_name: str
    sector: str
    market_price: float
    volatility: float = DEFAULT_VOLATILITY
    sentiment: float = ZERO
    previous_close_price: float | None = None
    open_price: float | None = None
    price_history: deque[float] = field(default_factory=lambda: deque(maxlen=PRICE_HISTORY_CAP))
    is_custom: bool = False
    halted: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize instrument data after initialization."""
        self.symbol = validate_symbol(self.symbol)

        if not is_finite_number(self.market_price) or self.market_price <= ZERO:
            raise ValidationError(f"Market price must be positive, got {self.market_price}")
        if not is_finite_number(self.volatility) or self.volatility < ZERO:
            raise ValidationError(f"Volatility must be non-negative, got {self.volatility}")

        self.sentiment = clamp(self.sentiment, SENTIMENT_MIN, SENTIMENT_MAX)
        if self.previous_close_price is None:
            self.previous_close_price = self.market_price
        if self.open_price is None:
            self.open_price = self.market_price

        # Re-wrap so externally supplied histories honour the cap
        history = deque(self.price_history, maxlen=PRICE_HISTORY_CAP)
        if not history:
            history.append(self.market_price)
        self.price_history = history

    def record_price(self, price: float) -> None:
        """Set the market price and append it to the history."""
        self.market_price = price
        self.price_history.append(price)

    def apply_sentiment(self, delta: float) -> float:
        """Shift sentiment by delta, clamped to [-1, 1].

        Returns:
            The new sentiment
        """
        self.sentiment = clamp(self.sentiment + delta, SENTIMENT_MIN, SENTIMENT_MAX)
        return self.sentiment

    def check_integrity(self) -> None:
        """Verify the instrument can be safely advanced.

        Raises:
            InstrumentCorruptError: If price, volatility or sentiment is unusable
        """
        if not is_finite_number(self.market_price) or self.market_price <= ZERO:
            raise InstrumentCorruptError(self.symbol, f"market_price={self.market_price!r}")
        if not is_finite_number(self.volatility) or self.volatility < ZERO:
            raise InstrumentCorruptError(self.symbol, f"volatility={self.volatility!r}")
        if not is_finite_number(self.sentiment):
            raise InstrumentCorruptError(self.symbol, f"sentiment={self.sentiment!r}")

    def day_change(self) -> dict[str, float]:
        """Calculate the change since the open.

        Returns:
            Dictionary with absolute "value" and "percent" change
        """
        open_price = self.open_price or self.market_price
        return {
            "value": round_price(self.market_price - open_price),
            "percent": round_percentage(((self.market_price / open_price) - 1) * 100),
        }

    def estimate_volatility(self) -> float:
        """Estimate annualised volatility from the price history.

        Returns:
            Standard deviation of period returns scaled by sqrt(252),
            or 0.0 when fewer than two prices are recorded
        """
        if len(self.price_history) < 2:
            return ZERO
        prices = np.asarray(self.price_history, dtype=float)
        returns = np.diff(prices) / prices[:-1]
        return float(np.std(returns) * np.sqrt(TRADING_DAYS_PER_YEAR))

    def formatted_price(self) -> str:
        """Get the price formatted for display."""
        return f"${self.market_price:,.2f}"

    def to_dict(self) -> dict:
        """Convert instrument to a plain dictionary."""
        return {
            "symbol": self.symbol,
            "company_name": self.company_name,
            "sector": self.sector,
            "market_price": self.market_price,
            "previous_close_price": self.previous_close_price,
            "open_price": self.open_price,
            "volatility": self.volatility,
            "sentiment": self.sentiment,
            "price_history": list(self.price_history),
            "is_custom": self.is_custom,
            "halted": self.halted,
        }

    @classmethod
    def create_simulated(
        cls,
        symbol: str,
        rng: random.Random | None = None,
        company_name: str | None = None,
        sector: str | None = None,
        market_price: float | None = None,
        volatility: float = DEFAULT_VOLATILITY,
        history_points: int = BACKFILL_HISTORY_POINTS,
    ) -> "Instrument":
        """Factory method to create an instrument with synthetic attributes.

        Args:
            symbol: Ticker symbol
            rng: Random source (default: a fresh unseeded Random)
            company_name: Display name (default: "*Simulated* <symbol>")
            sector: Sector (default: random pick from DEFAULT_SECTORS)
            market_price: Current price (default: uniform in [10, 500))
            volatility: Per-tick volatility fraction
            history_points: Number of back-filled history points

        Returns:
            New Instrument instance
        """
        rng = rng or random.Random()
        symbol = validate_symbol(symbol)

        price = market_price if market_price is not None else round_price(10 + rng.random() * 490)
        previous_close = round_price(price * (1 + rng.random() * 0.06 - 0.03))
        open_price = round_price(previous_close + (price - previous_close) * rng.random())

        instrument = cls(
            symbol=symbol,
            company_name=company_name or f"*Simulated* {symbol}",
            sector=sector or rng.choice(DEFAULT_SECTORS),
            market_price=price,
            volatility=volatility,
            sentiment=round(rng.random() * 1.6 - 0.8, 2),
            previous_close_price=previous_close,
            open_price=open_price,
            price_history=deque(
                backfill_price_history(price, history_points, volatility, rng),
                maxlen=PRICE_HISTORY_CAP,
            ),
        )
        return instrument


def backfill_price_history(
    current_price: float, points: int, volatility: float, rng: random.Random
) -> list[float]:
    """Generate a plausible history ending at current_price.

    Walks backwards from the current price with a small random trend bias,
    dividing by (1 + change) at each step.

    Returns:
        Prices ordered oldest first, last entry equal to current_price
    """
    trend_bias = rng.random() * 0.006 - 0.003
    history = [current_price]
    price = current_price
    for _ in range(max(points - 1, 0)):
        change = trend_bias + volatility * (rng.random() + rng.random() + rng.random() - 1.5)
        price = max(price / (1 + change), PRICE_FLOOR)
        history.append(price)
    history.reverse()
    return history

"""
Simulation configuration model.
"""

from dataclasses import asdict, dataclass

from papertrade.core.constants import (
    COMPANY_NEWS_PROBABILITY,
    DEFAULT_INITIAL_BALANCE,
    DEFAULT_NEWS_INTERVAL_SECONDS,
    DEFAULT_TICK_INTERVAL_SECONDS,
    HEADLINE_CACHE_TTL_SECONDS,
    MARKET_NEWS_DAMPENER,
    MAX_INITIAL_BALANCE,
    MAX_ORDER_QUANTITY,
    MIN_INITIAL_BALANCE,
    POSITIVE_NEWS_PROBABILITY,
    SECTOR_NEWS_PROBABILITY,
    TEXT_GENERATOR_BACKOFF_SECONDS,
    TEXT_GENERATOR_TIMEOUT_SECONDS,
)
from papertrade.core.enums import EventFrequency, MarketVolatility
from papertrade.core.exceptions.simulation import ConfigurationError


@dataclass
class SimulationConfig:
    """Configuration for a simulation session."""

    initial_balance: float = DEFAULT_INITIAL_BALANCE
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    news_interval_seconds: float = DEFAULT_NEWS_INTERVAL_SECONDS
    market_volatility: MarketVolatility = MarketVolatility.MEDIUM
    event_frequency: EventFrequency = EventFrequency.MEDIUM
    max_order_quantity: int = MAX_ORDER_QUANTITY
    company_news_probability: float = COMPANY_NEWS_PROBABILITY
    sector_news_probability: float = SECTOR_NEWS_PROBABILITY
    positive_news_probability: float = POSITIVE_NEWS_PROBABILITY
    market_news_dampener: float = MARKET_NEWS_DAMPENER
    text_generator_timeout_seconds: float = TEXT_GENERATOR_TIMEOUT_SECONDS
    headline_cache_ttl_seconds: float = HEADLINE_CACHE_TTL_SECONDS
    text_generator_backoff_seconds: float = TEXT_GENERATOR_BACKOFF_SECONDS
    seed: int | None = None

    def is_valid_balance(self) -> bool:
        """Validate initial balance is within limits."""
        return MIN_INITIAL_BALANCE <= self.initial_balance <= MAX_INITIAL_BALANCE

    def is_valid_intervals(self) -> bool:
        """Validate tick and news intervals are positive."""
        return self.tick_interval_seconds > 0 and self.news_interval_seconds > 0

    def is_valid_news_split(self) -> bool:
        """Validate the category probabilities leave a non-negative market share."""
        probabilities = [
            self.company_news_probability,
            self.sector_news_probability,
            self.positive_news_probability,
        ]
        if any(p < 0 or p > 1 for p in probabilities):
            return False
        return self.company_news_probability + self.sector_news_probability <= 1.0

    def is_valid_dampener(self) -> bool:
        """Validate the market news dampener is a fraction."""
        return 0.0 <= self.market_news_dampener <= 1.0

    def is_valid_timeouts(self) -> bool:
        """Validate generator timeout, cache TTL and failure back-off."""
        return (
            self.text_generator_timeout_seconds > 0
            and self.headline_cache_ttl_seconds > 0
            and self.text_generator_backoff_seconds >= 0
        )

    def validate(self) -> "SimulationConfig":
        """Check every setting.

        Raises:
            ConfigurationError: Naming the first invalid setting
        """
        checks = [
            (self.is_valid_balance(), f"initial_balance out of range: {self.initial_balance}"),
            (self.is_valid_intervals(), "tick and news intervals must be positive"),
            (self.max_order_quantity > 0, "max_order_quantity must be positive"),
            (self.is_valid_news_split(), "news category probabilities are invalid"),
            (self.is_valid_dampener(), "market_news_dampener must be between 0 and 1"),
            (self.is_valid_timeouts(), "generator timeout and cache TTL must be positive, back-off non-negative"),
        ]
        for passed, message in checks:
            if not passed:
                raise ConfigurationError(message)
        return self

    def volatility_factor(self) -> float:
        """Get the global volatility multiplier."""
        return MarketVolatility.factor(self.market_volatility)

    def effective_news_interval(self) -> float | None:
        """Get the news interval after the frequency preset, None when disabled."""
        multiplier = EventFrequency.interval_multiplier(self.event_frequency)
        if multiplier is None:
            return None
        return self.news_interval_seconds * multiplier

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        data = asdict(self)
        data["market_volatility"] = self.market_volatility.value
        data["event_frequency"] = self.event_frequency.value
        return data

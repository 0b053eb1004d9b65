"""
Stochastic price model.

Each tick moves an instrument by a random fraction of its volatility,
drifted by its current sentiment.
"""

import random

from loguru import logger

from papertrade.core.constants import PRICE_FLOOR
from papertrade.core.models.instrument import Instrument
from papertrade.core.protocols import RandomSource


class PriceModel:
    """Advances instrument prices one tick at a time.

    change = price * volatility * factor * (uniform(-1, 1) + sentiment)
    new_price = max(price + change, PRICE_FLOOR)
    """

    def __init__(self, rng: RandomSource | None = None, volatility_factor: float = 1.0) -> None:
        """Initialize the model.

        Args:
            rng: Random source; inject a seeded random.Random for determinism
            volatility_factor: Global multiplier from the market volatility preset
        """
        if volatility_factor < 0:
            raise ValueError(f"Volatility factor must be non-negative, got {volatility_factor}")
        self.rng = rng or random.Random()
        self.volatility_factor = volatility_factor

    def advance(self, instrument: Instrument) -> float:
        """Move the instrument one tick and record the new price.

        Args:
            instrument: Instrument to advance in place

        Returns:
            The new market price

        Raises:
            InstrumentCorruptError: If the instrument state is not finite
        """
        instrument.check_integrity()

        price = instrument.market_price
        shock = self.rng.uniform(-1.0, 1.0) + instrument.sentiment
        change = price * instrument.volatility * self.volatility_factor * shock
        new_price = max(price + change, PRICE_FLOOR)

        instrument.record_price(new_price)
        logger.debug(f"{instrument.symbol}: {price:.4f} -> {new_price:.4f}")
        return new_price

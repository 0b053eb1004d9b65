"""
Unit tests for the stochastic price model.
"""

import math
import random

import pytest

from papertrade.core.constants import PRICE_FLOOR, PRICE_HISTORY_CAP
from papertrade.core.engine.price_model import PriceModel
from papertrade.core.exceptions.simulation import InstrumentCorruptError
from papertrade.core.models.instrument import Instrument


class FixedRandom:
    """Random source returning a fixed uniform draw."""

    def __init__(self, draw: float) -> None:
        self.draw = draw

    def random(self) -> float:
        return 0.5

    def uniform(self, a: float, b: float) -> float:
        return self.draw

    def choice(self, seq):
        return seq[0]


class TestPriceModel:
    """Test suite for PriceModel.advance."""

    def test_should_apply_volatility_and_sentiment(self) -> None:
        """Test change = price * vol * (draw + sentiment)."""
        # Arrange
        instrument = Instrument("AAPL", "Apple", "Technology", 100.0, volatility=0.02, sentiment=0.5)
        model = PriceModel(FixedRandom(0.5))

        # Act
        new_price = model.advance(instrument)

        # Assert
        assert new_price == pytest.approx(102.0)
        assert instrument.market_price == pytest.approx(102.0)
        assert instrument.price_history[-1] == pytest.approx(102.0)

    def test_should_scale_by_volatility_factor(self) -> None:
        """Test the global volatility multiplier."""
        instrument = Instrument("AAPL", "Apple", "Technology", 100.0, volatility=0.02)
        model = PriceModel(FixedRandom(1.0), volatility_factor=1.6)

        assert model.advance(instrument) == pytest.approx(103.2)

    def test_should_never_drop_below_floor(self) -> None:
        """Test the price floor holds for a crashing instrument."""
        # Arrange
        instrument = Instrument("PENNY", "Penny", "Energy", 0.02, volatility=1.0, sentiment=-1.0)
        model = PriceModel(FixedRandom(-1.0))

        # Act
        for _ in range(10):
            model.advance(instrument)

        # Assert
        assert instrument.market_price == PRICE_FLOOR
        assert min(instrument.price_history) >= PRICE_FLOOR

    def test_should_keep_floor_and_cap_under_random_walk(self) -> None:
        """Test floor and history cap over many seeded ticks."""
        instrument = Instrument("WILD", "Wild", "Energy", 5.0, volatility=0.5)
        model = PriceModel(random.Random(42), volatility_factor=1.6)

        for _ in range(PRICE_HISTORY_CAP * 3):
            assert model.advance(instrument) >= PRICE_FLOOR

        assert len(instrument.price_history) == PRICE_HISTORY_CAP

    def test_should_be_deterministic_with_seeded_rng(self) -> None:
        """Test the same seed yields the same path."""
        a = Instrument("AAPL", "Apple", "Technology", 100.0)
        b = Instrument("AAPL", "Apple", "Technology", 100.0)
        model_a = PriceModel(random.Random(9))
        model_b = PriceModel(random.Random(9))

        path_a = [model_a.advance(a) for _ in range(20)]
        path_b = [model_b.advance(b) for _ in range(20)]

        assert path_a == path_b

    def test_should_raise_for_corrupt_instrument(self) -> None:
        """Test advance refuses non-finite state without mutating history."""
        instrument = Instrument("AAPL", "Apple", "Technology", 100.0)
        instrument.sentiment = math.inf
        model = PriceModel(FixedRandom(0.0))

        with pytest.raises(InstrumentCorruptError):
            model.advance(instrument)
        assert list(instrument.price_history) == [100.0]

    def test_should_reject_negative_volatility_factor(self) -> None:
        """Test constructor validation."""
        with pytest.raises(ValueError, match="non-negative"):
            PriceModel(volatility_factor=-0.1)

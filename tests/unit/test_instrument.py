"""
Unit tests for the Instrument domain model.
"""

import math
import random
from collections import deque

import pytest

from papertrade.core.constants import PRICE_HISTORY_CAP
from papertrade.core.exceptions.simulation import InstrumentCorruptError, ValidationError
from papertrade.core.models.instrument import Instrument, backfill_price_history


class TestInstrumentCreation:
    """Test suite for instrument construction."""

    def test_should_create_instrument_with_defaults(self) -> None:
        """Test defaults for close, open and history."""
        # Arrange & Act
        instrument = Instrument("aapl", "Apple Inc.", "Technology", 187.30)

        # Assert
        assert instrument.symbol == "AAPL"
        assert instrument.previous_close_price == 187.30
        assert instrument.open_price == 187.30
        assert list(instrument.price_history) == [187.30]
        assert instrument.sentiment == 0.0
        assert not instrument.halted

    def test_should_clamp_initial_sentiment(self) -> None:
        """Test sentiment outside [-1, 1] is clamped."""
        instrument = Instrument("MSFT", "Microsoft", "Technology", 340.0, sentiment=3.0)
        assert instrument.sentiment == 1.0

    @pytest.mark.parametrize("price", [0.0, -5.0, math.nan])
    def test_should_reject_invalid_price(self, price: float) -> None:
        """Test market price must be finite and positive."""
        with pytest.raises(ValidationError):
            Instrument("AAPL", "Apple", "Technology", price)

    def test_should_cap_supplied_history(self) -> None:
        """Test externally supplied histories honour the cap."""
        history = deque(float(i + 1) for i in range(250))

        instrument = Instrument("AAPL", "Apple", "Technology", 250.0, price_history=history)

        assert len(instrument.price_history) == PRICE_HISTORY_CAP
        assert instrument.price_history[0] == 151.0


class TestInstrumentBehavior:
    """Test suite for instrument mutation and derived values."""

    @pytest.fixture
    def instrument(self) -> Instrument:
        """Create a plain instrument."""
        return Instrument("AAPL", "Apple Inc.", "Technology", 100.0)

    def test_should_evict_oldest_price_past_cap(self, instrument: Instrument) -> None:
        """Test history never exceeds the cap and keeps the latest prices."""
        # Act
        for i in range(PRICE_HISTORY_CAP + 20):
            instrument.record_price(100.0 + i)

        # Assert
        assert len(instrument.price_history) == PRICE_HISTORY_CAP
        assert instrument.price_history[-1] == 100.0 + PRICE_HISTORY_CAP + 19
        assert instrument.market_price == instrument.price_history[-1]

    def test_should_clamp_sentiment_updates(self, instrument: Instrument) -> None:
        """Test apply_sentiment stays within [-1, 1]."""
        assert instrument.apply_sentiment(0.7) == 0.7
        assert instrument.apply_sentiment(0.7) == 1.0
        assert instrument.apply_sentiment(-5.0) == -1.0

    def test_should_detect_corruption(self, instrument: Instrument) -> None:
        """Test check_integrity raises on non-finite state."""
        instrument.check_integrity()

        instrument.market_price = math.nan
        with pytest.raises(InstrumentCorruptError, match="AAPL"):
            instrument.check_integrity()

    def test_should_calculate_day_change(self, instrument: Instrument) -> None:
        """Test change versus the open."""
        instrument.record_price(110.0)

        change = instrument.day_change()

        assert change["value"] == 10.0
        assert change["percent"] == 10.0

    def test_should_estimate_zero_volatility_for_flat_history(self, instrument: Instrument) -> None:
        """Test volatility estimate of an unchanging price."""
        assert instrument.estimate_volatility() == 0.0
        instrument.record_price(100.0)
        instrument.record_price(100.0)
        assert instrument.estimate_volatility() == 0.0

    def test_should_estimate_positive_volatility_for_moving_history(
        self, instrument: Instrument
    ) -> None:
        """Test volatility estimate of a moving price."""
        for price in (101.0, 99.0, 102.0, 98.0):
            instrument.record_price(price)
        assert instrument.estimate_volatility() > 0.0

    def test_should_format_price_and_serialize(self, instrument: Instrument) -> None:
        """Test display formatting and dict conversion."""
        instrument.record_price(1234.5)

        assert instrument.formatted_price() == "$1,234.50"
        data = instrument.to_dict()
        assert data["symbol"] == "AAPL"
        assert data["price_history"] == [100.0, 1234.5]


class TestSimulatedInstruments:
    """Test suite for synthetic instrument creation."""

    def test_should_create_simulated_instrument_deterministically(self) -> None:
        """Test the factory with a seeded random source."""
        a = Instrument.create_simulated("nova", rng=random.Random(7))
        b = Instrument.create_simulated("nova", rng=random.Random(7))

        assert a.symbol == "NOVA"
        assert a.market_price == b.market_price
        assert list(a.price_history) == list(b.price_history)
        assert 10.0 <= a.market_price < 500.0
        assert -0.8 <= a.sentiment <= 0.8
        assert a.company_name == "*Simulated* NOVA"

    def test_should_backfill_history_ending_at_current_price(self) -> None:
        """Test back-filled history length and last point."""
        history = backfill_price_history(50.0, 30, 0.02, random.Random(1))

        assert len(history) == 30
        assert history[-1] == 50.0
        assert all(price >= 0.01 for price in history)

    def test_should_keep_requested_price(self) -> None:
        """Test the factory honours an explicit price."""
        instrument = Instrument.create_simulated(
            "ACME", rng=random.Random(3), market_price=42.0, sector="Energy"
        )

        assert instrument.market_price == 42.0
        assert instrument.sector == "Energy"
        assert instrument.price_history[-1] == 42.0

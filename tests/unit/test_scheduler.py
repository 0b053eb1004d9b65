"""
Unit tests for the asyncio tick scheduler and clocks.
"""

import asyncio
from datetime import UTC, datetime

import pytest

from papertrade.core.engine.clock import ManualClock, MonotonicClock
from papertrade.core.engine.scheduler import Scheduler
from papertrade.core.engine.session import SimulationSession, TickReport
from papertrade.core.enums import EventFrequency
from papertrade.core.models.instrument import Instrument
from papertrade.core.models.simulation_config import SimulationConfig

START = datetime(2024, 1, 1, 9, 30, tzinfo=UTC)


def make_session() -> SimulationSession:
    """Session with one instrument and news disabled."""
    return SimulationSession(
        config=SimulationConfig(event_frequency=EventFrequency.NONE, seed=1),
        instruments=[Instrument("AAPL", "Apple Inc.", "Technology", 100.0)],
        clock=ManualClock(START),
    )


class TestClocks:
    """Test suite for clock implementations."""

    def test_should_advance_manual_clock(self) -> None:
        """Test ManualClock only moves forward when told."""
        clock = ManualClock(START)

        assert clock.now() == START
        assert (clock.advance(30) - START).total_seconds() == 30
        with pytest.raises(ValueError):
            clock.advance(-1)

    def test_should_never_go_backwards(self) -> None:
        """Test MonotonicClock is non-decreasing and timezone-aware."""
        clock = MonotonicClock()

        readings = [clock.now() for _ in range(100)]

        assert readings == sorted(readings)
        assert readings[0].tzinfo is not None


class TestScheduler:
    """Test suite for Scheduler."""

    @pytest.mark.asyncio
    async def test_should_run_single_tick(self) -> None:
        """Test run_once returns the tick report and invokes the callback."""
        # Arrange
        reports: list[TickReport] = []
        scheduler = Scheduler(make_session(), on_tick=reports.append)

        # Act
        report = await scheduler.run_once(START)

        # Assert
        assert report.timestamp == START
        assert reports == [report]
        assert scheduler.ticks_run == 1

    @pytest.mark.asyncio
    async def test_should_tick_until_stopped(self) -> None:
        """Test the loop ticks repeatedly and stop is idempotent."""
        # Arrange
        session = make_session()
        scheduler = Scheduler(session)

        # Act
        scheduler.start(interval=0.01)
        await asyncio.sleep(0.1)
        await scheduler.stop()
        ticks_after_stop = scheduler.ticks_run
        await asyncio.sleep(0.05)
        await scheduler.stop()

        # Assert
        assert ticks_after_stop >= 2
        assert scheduler.ticks_run == ticks_after_stop
        assert not scheduler.is_running
        assert len(session.get_instrument("AAPL").price_history) == ticks_after_stop + 1

    @pytest.mark.asyncio
    async def test_should_ignore_second_start(self) -> None:
        """Test start while running is a no-op."""
        scheduler = Scheduler(make_session())

        scheduler.start(interval=0.01)
        first_task = scheduler._task
        scheduler.start(interval=0.01)

        assert scheduler._task is first_task
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_should_reject_non_positive_interval(self) -> None:
        """Test interval validation."""
        scheduler = Scheduler(make_session())

        with pytest.raises(ValueError, match="positive"):
            scheduler.start(interval=0)

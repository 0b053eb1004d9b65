"""
Simulation clocks.
"""

import threading
import time
from datetime import UTC, datetime, timedelta


class MonotonicClock:
    """Wall-clock time anchored at creation and advanced by time.monotonic.

    Successive calls never go backwards, even if the system clock does.
    """

    def __init__(self) -> None:
        self._origin = datetime.now(UTC)
        self._start = time.monotonic()

    def now(self) -> datetime:
        return self._origin + timedelta(seconds=time.monotonic() - self._start)


class ManualClock:
    """Clock that only moves when told to. Used by tests and scripted runs."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=UTC)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> datetime:
        """Move the clock forward and return the new time."""
        if seconds < 0:
            raise ValueError(f"Clock cannot move backwards, got {seconds}")
        with self._lock:
            self._now += timedelta(seconds=seconds)
            return self._now

"""
Core type definitions and protocols.

This module defines shared callables and protocols so the engine can take
its collaborators (clock, randomness, notification sink) by injection.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, Protocol

# Returns the current price for a symbol, or None when the symbol is unknown
PriceLookup = Callable[[str], float | None]


class RandomSource(Protocol):
    """Protocol for the randomness used by the price and news models.

    ``random.Random`` satisfies it; tests inject a seeded instance.
    """

    def random(self) -> float:
        """Return a float in [0, 1)."""
        ...

    def uniform(self, a: float, b: float) -> float:
        """Return a float in [a, b]."""
        ...

    def choice(self, seq: Sequence[Any]) -> Any:
        """Return a random element of seq."""
        ...


class Clock(Protocol):
    """Protocol for the simulation clock."""

    def now(self) -> datetime:
        """Return the current, non-decreasing time."""
        ...


class NotificationSink(Protocol):
    """Protocol for display notifications. Must not block the core."""

    def notify(self, message: str) -> None:
        """Receive a human-readable outcome string."""
        ...

"""
Simulation setting enumerations.

This module defines the user-facing presets for market volatility and
news frequency.
"""

from enum import StrEnum


class MarketVolatility(StrEnum):
    """
    Market volatility presets.

    Each preset scales every instrument's per-tick volatility.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def factor(cls, level: "MarketVolatility") -> float:
        """
        Get the volatility multiplier for a preset.

        Args:
            level: Volatility preset

        Returns:
            Multiplier applied to instrument volatility
        """
        factors = {
            cls.LOW: 0.6,
            cls.MEDIUM: 1.0,
            cls.HIGH: 1.6,
        }
        return factors[level]


class EventFrequency(StrEnum):
    """
    News frequency presets.

    NONE disables news entirely; the others scale the news interval.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def interval_multiplier(cls, level: "EventFrequency") -> float | None:
        """
        Get the interval multiplier for a preset.

        Args:
            level: Frequency preset

        Returns:
            Multiplier applied to the base news interval, None when disabled
        """
        multipliers = {
            cls.NONE: None,
            cls.LOW: 2.5,
            cls.MEDIUM: 1.0,
            cls.HIGH: 0.5,
        }
        return multipliers[level]

    @property
    def is_enabled(self) -> bool:
        """Check if news is generated at all."""
        return self != self.NONE

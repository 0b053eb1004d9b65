"""
News scope and polarity enumerations.

This module defines what a synthetic story targets and which way it
pushes sentiment.
"""

from enum import StrEnum


class NewsScope(StrEnum):
    """
    What a news story targets.

    Company stories hit one instrument, sector stories every instrument in
    the sector, market stories every instrument at a dampened impact.
    """

    COMPANY = "company"
    SECTOR = "sector"
    MARKET = "market"

    @property
    def is_broad(self) -> bool:
        """Check if the story affects more than one instrument."""
        return self in [self.SECTOR, self.MARKET]


class NewsPolarity(StrEnum):
    """Direction of a story's sentiment impact."""

    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def sign(self) -> float:
        """Get the multiplier applied to template magnitudes."""
        return 1.0 if self == self.POSITIVE else -1.0

    @classmethod
    def from_impact(cls, impact: float) -> "NewsPolarity":
        """Derive polarity from a signed impact value."""
        return cls.POSITIVE if impact >= 0 else cls.NEGATIVE


class NewsSource(StrEnum):
    """Where a headline came from."""

    GENERATOR = "generator"  # External text-generation service
    TEMPLATE = "template"  # Local template table

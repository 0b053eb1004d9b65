"""
News item domain model.
"""

from dataclasses import dataclass, field
from datetime import datetime

from papertrade.core.enums import NewsPolarity, NewsScope, NewsSource


@dataclass(frozen=True)
class NewsItem:
    """A synthetic story. Ephemeral: applied, shown, then discarded."""

    headline: str
    scope: NewsScope
    target: str | None  # Symbol for company news, sector name for sector news
    impact: float
    timestamp: datetime
    source: NewsSource = NewsSource.TEMPLATE
    affected_symbols: tuple[str, ...] = field(default_factory=tuple)

    @property
    def polarity(self) -> NewsPolarity:
        """Get the direction of the story."""
        return NewsPolarity.from_impact(self.impact)

    def to_dict(self) -> dict:
        """Convert news item to dictionary."""
        return {
            "headline": self.headline,
            "scope": self.scope.value,
            "target": self.target,
            "impact": self.impact,
            "polarity": self.polarity.value,
            "source": self.source.value,
            "affected_symbols": list(self.affected_symbols),
            "timestamp": self.timestamp.isoformat(),
        }

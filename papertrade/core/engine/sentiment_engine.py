"""
Sentiment engine: synthetic news generation and impact propagation.

A story is either requested from an external text generator (bounded by a
timeout and a short-lived cache) or drawn from the local template table.
Its impact shifts the sentiment of the instruments it targets.
"""

import math
import random
from collections import deque
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from datetime import datetime, timedelta

from cachetools import TTLCache
from loguru import logger

from papertrade.core.constants import (
    COMPANY_NEWS_PROBABILITY,
    DEFAULT_NEWS_INTERVAL_SECONDS,
    HEADLINE_CACHE_TTL_SECONDS,
    MARKET_NEWS_DAMPENER,
    NEWS_FEED_SIZE,
    POSITIVE_NEWS_PROBABILITY,
    SECTOR_NEWS_PROBABILITY,
    SENTIMENT_MAX,
    SENTIMENT_MIN,
    TEXT_GENERATOR_BACKOFF_SECONDS,
    TEXT_GENERATOR_TIMEOUT_SECONDS,
)
from papertrade.core.enums import NewsPolarity, NewsScope, NewsSource
from papertrade.core.exceptions.simulation import ExternalServiceError
from papertrade.core.interfaces.collaborators import GeneratedHeadline, ITextGenerator
from papertrade.core.models.instrument import Instrument
from papertrade.core.models.news import NewsItem
from papertrade.core.protocols import RandomSource
from papertrade.core.types.financial import clamp

from .news_templates import templates_for

_CACHE_KEY = "headline"


@dataclass(frozen=True)
class NewsConfig:
    """Tunable parameters of the news generator.

    interval_seconds of None disables news entirely. After a generator
    failure only templates are used for generator_backoff_seconds.
    """

    interval_seconds: float | None = DEFAULT_NEWS_INTERVAL_SECONDS
    company_probability: float = COMPANY_NEWS_PROBABILITY
    sector_probability: float = SECTOR_NEWS_PROBABILITY
    positive_probability: float = POSITIVE_NEWS_PROBABILITY
    market_dampener: float = MARKET_NEWS_DAMPENER
    generator_timeout_seconds: float = TEXT_GENERATOR_TIMEOUT_SECONDS
    cache_ttl_seconds: float = HEADLINE_CACHE_TTL_SECONDS
    generator_backoff_seconds: float = TEXT_GENERATOR_BACKOFF_SECONDS


class SentimentEngine:
    """Publishes news on an interval and applies its sentiment impact.

    The first call to tick always publishes; later calls publish once
    interval_seconds have elapsed since the previous story.
    """

    def __init__(
        self,
        config: NewsConfig | None = None,
        rng: RandomSource | None = None,
        text_generator: ITextGenerator | None = None,
        cache_timer=None,
    ) -> None:
        self.config = config or NewsConfig()
        self.rng = rng or random.Random()
        self.text_generator = text_generator
        self.enabled = self.config.interval_seconds is not None
        self.interval_seconds = self.config.interval_seconds

        cache_kwargs = {"timer": cache_timer} if cache_timer is not None else {}
        self._cache: TTLCache = TTLCache(maxsize=1, ttl=self.config.cache_ttl_seconds, **cache_kwargs)
        self._executor: ThreadPoolExecutor | None = None
        self._last_published: datetime | None = None
        self._generator_retry_at: datetime | None = None
        self._feed: deque[NewsItem] = deque(maxlen=NEWS_FEED_SIZE)

    def set_interval(self, interval_seconds: float | None) -> None:
        """Change the publishing interval; None disables news."""
        self.interval_seconds = interval_seconds
        self.enabled = interval_seconds is not None
        logger.info(f"News interval set to {interval_seconds}")

    def recent_news(self) -> list[NewsItem]:
        """Get the recent-news feed, newest first."""
        return list(reversed(self._feed))

    def is_due(self, now: datetime) -> bool:
        """Check whether a story should be published at now."""
        if not self.enabled or self.interval_seconds is None:
            return False
        if self._last_published is None:
            return True
        return (now - self._last_published).total_seconds() >= self.interval_seconds

    def tick(self, now: datetime, instruments: Mapping[str, Instrument]) -> NewsItem | None:
        """Maybe publish one story and apply it.

        Args:
            now: Current simulation time
            instruments: Tradable instruments keyed by symbol; halted ones are ignored

        Returns:
            The published NewsItem, or None when nothing was due
        """
        if not self.is_due(now):
            return None

        live = {symbol: inst for symbol, inst in instruments.items() if not inst.halted}
        if not live:
            return None

        item: NewsItem | None = None
        if self._generator_available(now):
            try:
                item = self._from_generator(now, live)
                self._generator_retry_at = None
            except ExternalServiceError as e:
                self._generator_retry_at = now + timedelta(
                    seconds=self.config.generator_backoff_seconds
                )
                logger.warning(
                    f"Text generator unavailable, using templates until "
                    f"{self._generator_retry_at.isoformat()}: {e}"
                )

        if item is None:
            item = self._from_template(now, live)

        affected = self._apply(item, live)
        item = NewsItem(
            headline=item.headline,
            scope=item.scope,
            target=item.target,
            impact=item.impact,
            timestamp=item.timestamp,
            source=item.source,
            affected_symbols=tuple(affected),
        )

        self._last_published = now
        self._feed.append(item)
        logger.info(
            f"News [{item.scope.value}/{item.polarity.value}] {item.headline} "
            f"(impact={item.impact:+.3f}, affected={len(affected)})"
        )
        return item

    def _generator_available(self, now: datetime) -> bool:
        if self.text_generator is None:
            return False
        return self._generator_retry_at is None or now >= self._generator_retry_at

    def _pick_scope(self) -> NewsScope:
        roll = self.rng.random()
        if roll < self.config.company_probability:
            return NewsScope.COMPANY
        if roll < self.config.company_probability + self.config.sector_probability:
            return NewsScope.SECTOR
        return NewsScope.MARKET

    def _pick_polarity(self) -> NewsPolarity:
        if self.rng.random() < self.config.positive_probability:
            return NewsPolarity.POSITIVE
        return NewsPolarity.NEGATIVE

    def _from_template(self, now: datetime, instruments: Mapping[str, Instrument]) -> NewsItem:
        """Draw a story from the local template table."""
        scope = self._pick_scope()
        polarity = self._pick_polarity()
        template = self.rng.choice(templates_for(scope, polarity))
        impact = template.magnitude * polarity.sign

        if scope == NewsScope.COMPANY:
            instrument = instruments[self.rng.choice(sorted(instruments))]
            headline = template.render(company=instrument.company_name)
            target: str | None = instrument.symbol
        elif scope == NewsScope.SECTOR:
            sector = self.rng.choice(sorted({inst.sector for inst in instruments.values()}))
            headline = template.render(sector=sector)
            target = sector
        else:
            headline = template.render()
            target = None

        return NewsItem(
            headline=headline,
            scope=scope,
            target=target,
            impact=impact,
            timestamp=now,
            source=NewsSource.TEMPLATE,
        )

    def _request_headline(self) -> GeneratedHeadline:
        """Call the external generator under the configured timeout.

        Raises:
            ExternalServiceError: On timeout or any generator failure
        """
        cached = self._cache.get(_CACHE_KEY)
        if cached is not None:
            logger.debug("Reusing cached generated headline")
            return cached

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="text-generator")

        timeout = self.config.generator_timeout_seconds
        future = self._executor.submit(self.text_generator.generate)
        try:
            headline = future.result(timeout=timeout)
        except FuturesTimeoutError as e:
            future.cancel()
            raise ExternalServiceError(f"Text generator timed out after {timeout}s") from e
        except ExternalServiceError:
            raise
        except Exception as e:
            raise ExternalServiceError(f"Text generator failed: {e}") from e

        if not isinstance(headline, GeneratedHeadline):
            raise ExternalServiceError(f"Malformed generator payload: {headline!r}")
        return headline

    def _from_generator(self, now: datetime, instruments: Mapping[str, Instrument]) -> NewsItem:
        """Build a company story from the external generator.

        Raises:
            ExternalServiceError: When the payload is unusable
        """
        generated = self._request_headline()

        symbol = str(generated.target_symbol).strip().upper()
        if symbol not in instruments:
            raise ExternalServiceError(f"Generator named unknown symbol {generated.target_symbol!r}")
        if not generated.headline or not isinstance(generated.impact, int | float):
            raise ExternalServiceError(f"Malformed generator payload: {generated!r}")
        if not math.isfinite(generated.impact):
            raise ExternalServiceError(f"Generator impact is not finite: {generated.impact!r}")

        self._cache[_CACHE_KEY] = generated
        return NewsItem(
            headline=generated.headline,
            scope=NewsScope.COMPANY,
            target=symbol,
            impact=clamp(float(generated.impact), SENTIMENT_MIN, SENTIMENT_MAX),
            timestamp=now,
            source=NewsSource.GENERATOR,
        )

    def _apply(self, item: NewsItem, instruments: Mapping[str, Instrument]) -> list[str]:
        """Shift sentiment of every instrument the story targets.

        Returns:
            Sorted symbols that were affected
        """
        if item.scope == NewsScope.COMPANY:
            targets = [instruments[item.target]] if item.target in instruments else []
            impact = item.impact
        elif item.scope == NewsScope.SECTOR:
            targets = [inst for inst in instruments.values() if inst.sector == item.target]
            impact = item.impact
        else:
            targets = list(instruments.values())
            impact = item.impact * self.config.market_dampener

        for instrument in targets:
            instrument.apply_sentiment(impact)
        return sorted(inst.symbol for inst in targets)

    def close(self) -> None:
        """Release the generator worker thread."""
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

"""
Scoreboard Service

Entry point for the update-priority scoreboard:

    fetch (current + previous period, concurrently)
        -> normalize page keys
        -> build trend windows (optional)
        -> score
        -> cache
        -> top N

A failed fetch aborts the whole computation; nothing is cached in that
case, so an earlier successful result keeps being served until it expires.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Callable, List, Optional, Protocol

from src.cache import TTLCache
from src.models import (
    DailyPageStats,
    PageEngagementStats,
    PageSearchStats,
    PriorityScore,
    TrendWindow,
)
from src.scoring import build_page_trends, build_period_trends, compute_update_priority
from src.utils.config import Settings
from src.utils.dates import DateRange, format_date, get_offset_range, parse_date
from src.utils.paths import normalize_page_path

logger = logging.getLogger(__name__)


class SearchDataProvider(Protocol):
    async def get_top_pages(self, start_date: str, end_date: str, limit: int = 1000) -> List[PageSearchStats]:
        ...


class AnalyticsDataProvider(Protocol):
    async def get_pages_aggregate(self, start_date: str, end_date: str) -> List[PageEngagementStats]:
        ...

    async def get_pages_by_day(self, start_date: str, end_date: str) -> List[DailyPageStats]:
        ...


def normalize_search_rows(rows: List[PageSearchStats]) -> List[PageSearchStats]:
    return [replace(row, page=normalize_page_path(row.page)) for row in rows]


def normalize_engagement_rows(rows: List[PageEngagementStats]) -> List[PageEngagementStats]:
    return [replace(row, page_path=normalize_page_path(row.page_path)) for row in rows]


class ScoreboardService:
    """Computes and caches the ranked list of pages needing an update."""

    CACHE_PREFIX = "scoreboard"

    def __init__(
        self,
        search_provider: SearchDataProvider,
        analytics_provider: AnalyticsDataProvider,
        cache: TTLCache,
        ttl_seconds: int = 900,
        limit: int = 100,
        fetch_limit: int = 1000,
        previous_start_days: int = 56,
        previous_end_days: int = 28,
        trend_source: str = "none",
        trend_window_days: int = 28,
        trend_metric: str = "sessions",
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize scoreboard service.

        Args:
            search_provider: Search Console data source
            analytics_provider: GA4 data source
            cache: Cache shared with the rest of the API
            ttl_seconds: Lifetime of a cached scoreboard
            limit: Maximum number of pages returned
            fetch_limit: GSC rows fetched per period
            previous_start_days: Previous period starts this many days ago
            previous_end_days: Previous period ends this many days ago
            trend_source: "none", "period" or "daily"
            trend_window_days: Window length for daily trends
            trend_metric: GA4 metric compared by the trend rules
            today: Clock for the previous period (defaults to date.today)
        """
        self.search_provider = search_provider
        self.analytics_provider = analytics_provider
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.limit = limit
        self.fetch_limit = fetch_limit
        self.previous_start_days = previous_start_days
        self.previous_end_days = previous_end_days
        self.trend_source = trend_source
        self.trend_window_days = trend_window_days
        self.trend_metric = trend_metric
        self._today = today or date.today

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        search_provider: SearchDataProvider,
        analytics_provider: AnalyticsDataProvider,
        cache: TTLCache,
    ) -> "ScoreboardService":
        return cls(
            search_provider=search_provider,
            analytics_provider=analytics_provider,
            cache=cache,
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            limit=settings.SCOREBOARD_LIMIT,
            fetch_limit=settings.SCOREBOARD_FETCH_LIMIT,
            previous_start_days=settings.PREVIOUS_PERIOD_START_DAYS,
            previous_end_days=settings.PREVIOUS_PERIOD_END_DAYS,
            trend_source=settings.trend_source,
            trend_window_days=settings.TREND_WINDOW_DAYS,
            trend_metric=settings.TREND_METRIC,
        )

    @classmethod
    def cache_key(cls, start_date: str, end_date: str) -> str:
        return f"{cls.CACHE_PREFIX}:{start_date}:{end_date}"

    def previous_period(self) -> DateRange:
        """
        Fixed-offset comparison window (56 to 28 days ago by default).

        It does not follow the length of the requested range.
        """
        return get_offset_range(self.previous_start_days, self.previous_end_days, today=self._today())

    async def get_scoreboard(
        self,
        start_date: str,
        end_date: str,
        previous: Optional[DateRange] = None,
    ) -> List[PriorityScore]:
        """
        Ranked pages needing attention for a date range.

        Args:
            start_date: Range start (YYYY-MM-DD)
            end_date: Range end (YYYY-MM-DD)
            previous: Explicit comparison range (defaults to the fixed offset)

        Returns:
            At most `limit` PriorityScore entries, highest priority first

        Raises:
            ProviderError: If any of the provider fetches fails
        """
        key = self.cache_key(start_date, end_date)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Serving cached scoreboard for {start_date}..{end_date}")
            return cached

        scores = await self._compute(start_date, end_date, previous or self.previous_period())
        self.cache.set(key, scores, self.ttl_seconds)
        return scores

    async def _compute(self, start_date: str, end_date: str, previous: DateRange) -> List[PriorityScore]:
        fetches = [
            self.search_provider.get_top_pages(start_date, end_date, self.fetch_limit),
            self.analytics_provider.get_pages_aggregate(start_date, end_date),
            self.search_provider.get_top_pages(previous.start_date, previous.end_date, self.fetch_limit),
            self.analytics_provider.get_pages_aggregate(previous.start_date, previous.end_date),
        ]
        if self.trend_source == "daily":
            window = self.daily_trend_range(end_date)
            fetches.append(self.analytics_provider.get_pages_by_day(window.start_date, window.end_date))

        # Every fetch is awaited so no failure goes unobserved; the first one aborts
        results = await asyncio.gather(*fetches, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Scoreboard fetch failed for {start_date}..{end_date}: {result}")
                raise result

        gsc_current, ga4_current, gsc_previous, ga4_previous = (
            normalize_search_rows(results[0]),
            normalize_engagement_rows(results[1]),
            normalize_search_rows(results[2]),
            normalize_engagement_rows(results[3]),
        )
        daily_rows = results[4] if len(results) > 4 else []

        trends = self._build_trends(end_date, ga4_current, ga4_previous, daily_rows)
        scores = compute_update_priority(gsc_current, ga4_current, trends, trends)

        logger.info(
            f"Scoreboard {start_date}..{end_date}: {len(gsc_current)} GSC pages, "
            f"{len(ga4_current)} GA4 pages, {len(gsc_previous)}/{len(ga4_previous)} previous-period rows, "
            f"{len(trends)} trends -> {len(scores)} flagged"
        )
        return scores[:self.limit]

    def daily_trend_range(self, end_date: str) -> DateRange:
        """The 2 x window days ending at end_date."""
        end = parse_date(end_date)
        start = end - timedelta(days=2 * self.trend_window_days - 1)
        return DateRange(format_date(start), end_date)

    def _build_trends(
        self,
        end_date: str,
        ga4_current: List[PageEngagementStats],
        ga4_previous: List[PageEngagementStats],
        daily_rows: List[DailyPageStats],
    ) -> List[TrendWindow]:
        if self.trend_source == "period":
            return build_period_trends(ga4_current, ga4_previous, end_date, metric=self.trend_metric)
        if self.trend_source == "daily":
            return build_page_trends(daily_rows, window_days=self.trend_window_days, metric=self.trend_metric)
        return []

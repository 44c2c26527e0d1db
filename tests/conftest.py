"""
Pytest Configuration and Shared Fixtures

Provides sample provider rows, in-memory fake providers and a controllable
clock for all test modules.
"""

import pytest
from typing import Dict, List, Optional, Tuple

from src.cache import TTLCache
from src.models import (
    DailyPageStats,
    DailySearchStats,
    PageEngagementStats,
    PageSearchStats,
    QueryStats,
    SiteMetrics,
)


# ============================================================================
# Fakes
# ============================================================================

class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSearchProvider:
    """Search Console stand-in that records every call."""

    def __init__(
        self,
        pages: Optional[List[PageSearchStats]] = None,
        by_range: Optional[Dict[Tuple[str, str], List[PageSearchStats]]] = None,
        queries: Optional[List[QueryStats]] = None,
        daily: Optional[List[DailySearchStats]] = None,
        error: Optional[Exception] = None,
    ):
        self.pages = pages or []
        self.by_range = by_range or {}
        self.queries = queries or []
        self.daily = daily or []
        self.error = error
        self.calls: List[tuple] = []

    async def get_top_pages(self, start_date, end_date, limit=1000):
        self.calls.append(("top", start_date, end_date, limit))
        if self.error:
            raise self.error
        return list(self.by_range.get((start_date, end_date), self.pages))[:limit]

    async def get_queries_for_page(self, start_date, end_date, page_url, limit=50):
        self.calls.append(("queries", start_date, end_date, page_url, limit))
        if self.error:
            raise self.error
        return list(self.queries)[:limit]

    async def get_daily(self, start_date, end_date):
        self.calls.append(("daily", start_date, end_date))
        if self.error:
            raise self.error
        return list(self.daily)


class FakeAnalyticsProvider:
    """GA4 stand-in that records every call."""

    def __init__(
        self,
        pages: Optional[List[PageEngagementStats]] = None,
        by_range: Optional[Dict[Tuple[str, str], List[PageEngagementStats]]] = None,
        daily: Optional[List[DailyPageStats]] = None,
        metrics: Optional[SiteMetrics] = None,
        error: Optional[Exception] = None,
    ):
        self.pages = pages or []
        self.by_range = by_range or {}
        self.daily = daily or []
        self.metrics = metrics or SiteMetrics()
        self.error = error
        self.calls: List[tuple] = []

    async def get_pages_aggregate(self, start_date, end_date):
        self.calls.append(("pages", start_date, end_date))
        if self.error:
            raise self.error
        return list(self.by_range.get((start_date, end_date), self.pages))

    async def get_pages_by_day(self, start_date, end_date):
        self.calls.append(("pages_by_day", start_date, end_date))
        if self.error:
            raise self.error
        return list(self.daily)

    async def get_site_metrics(self, start_date, end_date):
        self.calls.append(("metrics", start_date, end_date))
        if self.error:
            raise self.error
        return self.metrics


# ============================================================================
# Sample Data
# ============================================================================

def search_row(page, clicks=0, impressions=0, ctr=None, position=None) -> PageSearchStats:
    return PageSearchStats(page=page, clicks=clicks, impressions=impressions, ctr=ctr, position=position)


def engagement_row(page_path, sessions=0, engaged_sessions=0, duration=0.0, conversions=0) -> PageEngagementStats:
    return PageEngagementStats(
        page_path=page_path,
        sessions=sessions,
        engaged_sessions=engaged_sessions,
        average_session_duration=duration,
        conversions=conversions,
    )


@pytest.fixture
def gsc_rows() -> List[PageSearchStats]:
    """
    GSC top pages:
    - /pricing: low CTR at a top position with high impressions (30 + 20)
    - /blog/old-post: poor position with moderate impressions (25)
    - /about: healthy
    """
    return [
        search_row("https://example.com/pricing/", clicks=20, impressions=2000, ctr=0.01, position=3.0),
        search_row("https://example.com/blog/old-post", clicks=40, impressions=800, ctr=0.05, position=15.0),
        search_row("https://example.com/about", clicks=10, impressions=100, ctr=0.1, position=2.0),
    ]


@pytest.fixture
def ga4_rows() -> List[PageEngagementStats]:
    """
    GA4 page aggregates:
    - /pricing: high traffic, short sessions (25 + 15)
    - /features: traffic only (15)
    - /blog/old-post/: quiet
    """
    return [
        engagement_row("/pricing", sessions=150, engaged_sessions=60, duration=20.0),
        engagement_row("/features", sessions=60, engaged_sessions=40, duration=45.0),
        engagement_row("/blog/old-post/", sessions=10, engaged_sessions=5, duration=80.0),
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def search_provider(gsc_rows) -> FakeSearchProvider:
    return FakeSearchProvider(pages=gsc_rows)


@pytest.fixture
def analytics_provider(ga4_rows) -> FakeAnalyticsProvider:
    return FakeAnalyticsProvider(pages=ga4_rows)

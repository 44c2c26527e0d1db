"""
GA4 API

Endpoints:
- Page aggregates (sessions, engagement, conversions per page path)
- Site totals
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from src.cache import TTLCache, add_cache_headers
from src.collector import AnalyticsDataClient
from src.utils.config import Settings
from src.utils.dates import DateRange

from api.dependencies import get_analytics_provider, get_app_settings, get_cache, get_date_range
from api.errors import provider_failure


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/ga4", tags=["GA4"])


class PageEngagementStatsResponse(BaseModel):
    pagePath: str
    sessions: int
    engagedSessions: int
    averageSessionDuration: float
    conversions: int


class SiteMetricsResponse(BaseModel):
    totalSessions: int
    totalEngagedSessions: int
    averageSessionDuration: float
    totalConversions: int
    bounceRate: float


@router.get("/pages", response_model=List[PageEngagementStatsResponse])
async def get_pages(
    response: Response,
    date_range: DateRange = Depends(get_date_range),
    ga4: AnalyticsDataClient = Depends(get_analytics_provider),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    """Per-page GA4 aggregates for the range."""
    key = f"ga4:pages:{date_range.start_date}:{date_range.end_date}"

    try:
        pages = await cache.get_or_compute(
            key,
            lambda: ga4.get_pages_aggregate(date_range.start_date, date_range.end_date),
            settings.CACHE_TTL_SECONDS,
        )
    except Exception as e:
        return provider_failure("GA4_PAGES_ERROR", "/api/ga4/pages", e)

    add_cache_headers(response, settings.CACHE_TTL_SECONDS)
    return [page.to_dict() for page in pages]


@router.get("/metrics", response_model=SiteMetricsResponse)
async def get_metrics(
    response: Response,
    date_range: DateRange = Depends(get_date_range),
    ga4: AnalyticsDataClient = Depends(get_analytics_provider),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    """Site-wide GA4 totals for the range."""
    key = f"ga4:metrics:{date_range.start_date}:{date_range.end_date}"

    try:
        metrics = await cache.get_or_compute(
            key,
            lambda: ga4.get_site_metrics(date_range.start_date, date_range.end_date),
            settings.CACHE_TTL_SECONDS,
        )
    except Exception as e:
        return provider_failure("GA4_METRICS_ERROR", "/api/ga4/metrics", e)

    add_cache_headers(response, settings.CACHE_TTL_SECONDS)
    return metrics.to_dict()

"""
Search Console API

Endpoints:
- Top pages by impressions
- Top queries for one page
- Daily site totals

All responses are memoized in the shared cache for CACHE_TTL_SECONDS.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from src.cache import TTLCache, add_cache_headers
from src.collector import SearchConsoleClient
from src.utils.config import Settings
from src.utils.dates import DateRange

from api.dependencies import (
    clamp_limit,
    get_app_settings,
    get_cache,
    get_date_range,
    get_search_provider,
)
from api.errors import error_response, provider_failure


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/gsc", tags=["Search Console"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class PageSearchStatsResponse(BaseModel):
    page: str
    clicks: int
    impressions: int
    ctr: Optional[float] = None
    position: Optional[float] = None


class QueryStatsResponse(BaseModel):
    query: str
    clicks: int
    impressions: int
    ctr: Optional[float] = None
    position: Optional[float] = None


class DailySearchStatsResponse(BaseModel):
    date: str
    clicks: int
    impressions: int
    ctr: Optional[float] = None
    position: Optional[float] = None


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/top", response_model=List[PageSearchStatsResponse])
async def get_top_pages(
    response: Response,
    limit: Optional[int] = Query(None, description="Maximum rows (clamped)"),
    date_range: DateRange = Depends(get_date_range),
    gsc: SearchConsoleClient = Depends(get_search_provider),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    """Top pages ordered by impressions."""
    row_limit = clamp_limit(limit, settings.DEFAULT_ROW_LIMIT, settings.MAX_ROW_LIMIT)
    key = f"gsc:top:{date_range.start_date}:{date_range.end_date}:{row_limit}"

    try:
        pages = await cache.get_or_compute(
            key,
            lambda: gsc.get_top_pages(date_range.start_date, date_range.end_date, row_limit),
            settings.CACHE_TTL_SECONDS,
        )
    except Exception as e:
        return provider_failure("GSC_TOP_ERROR", "/api/gsc/top", e)

    add_cache_headers(response, settings.CACHE_TTL_SECONDS)
    return [page.to_dict() for page in pages[:row_limit]]


@router.get("/queries", response_model=List[QueryStatsResponse])
async def get_queries_for_page(
    response: Response,
    page: Optional[str] = Query(None, description="Page URL as reported by Search Console"),
    limit: Optional[int] = Query(None, description="Maximum rows (clamped)"),
    date_range: DateRange = Depends(get_date_range),
    gsc: SearchConsoleClient = Depends(get_search_provider),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    """Top queries for one page."""
    if not page:
        return error_response(400, "MISSING_PAGE_PARAM", "Page parameter is required")

    row_limit = clamp_limit(limit, settings.DEFAULT_QUERY_LIMIT, settings.MAX_ROW_LIMIT)
    key = f"gsc:queries:{page}:{date_range.start_date}:{date_range.end_date}:{row_limit}"

    try:
        queries = await cache.get_or_compute(
            key,
            lambda: gsc.get_queries_for_page(date_range.start_date, date_range.end_date, page, row_limit),
            settings.CACHE_TTL_SECONDS,
        )
    except Exception as e:
        return provider_failure("GSC_QUERIES_ERROR", "/api/gsc/queries", e)

    add_cache_headers(response, settings.CACHE_TTL_SECONDS)
    return [query.to_dict() for query in queries[:row_limit]]


@router.get("/daily", response_model=List[DailySearchStatsResponse])
async def get_daily(
    response: Response,
    date_range: DateRange = Depends(get_date_range),
    gsc: SearchConsoleClient = Depends(get_search_provider),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
):
    """Site-wide search totals per day."""
    key = f"gsc:daily:{date_range.start_date}:{date_range.end_date}"

    try:
        days = await cache.get_or_compute(
            key,
            lambda: gsc.get_daily(date_range.start_date, date_range.end_date),
            settings.CACHE_TTL_SECONDS,
        )
    except Exception as e:
        return provider_failure("GSC_DAILY_ERROR", "/api/gsc/daily", e)

    add_cache_headers(response, settings.CACHE_TTL_SECONDS)
    return [day.to_dict() for day in days]

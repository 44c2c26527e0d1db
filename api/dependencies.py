"""
Route Dependencies

The cache, providers and scoreboard service are built once by create_app()
and stored on app.state; routes receive them through these dependencies.
"""

from typing import Optional

from fastapi import Query, Request

from src.cache import TTLCache
from src.collector import AnalyticsDataClient, SearchConsoleClient
from src.services import ScoreboardService
from src.utils.config import Settings
from src.utils.dates import DateRange, resolve_date_range


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


def get_search_provider(request: Request) -> SearchConsoleClient:
    return request.app.state.search_provider


def get_analytics_provider(request: Request) -> AnalyticsDataClient:
    return request.app.state.analytics_provider


def get_scoreboard_service(request: Request) -> ScoreboardService:
    return request.app.state.scoreboard_service


def get_date_range(
    request: Request,
    start: Optional[str] = Query(None, description="Range start (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Range end (YYYY-MM-DD)"),
) -> DateRange:
    """Requested range; each missing bound defaults to the trailing window."""
    settings: Settings = request.app.state.settings
    return resolve_date_range(start, end, default_days=settings.DEFAULT_RANGE_DAYS)


def clamp_limit(limit: Optional[int], default: int, maximum: int) -> int:
    """Apply the endpoint default and keep the limit within [1, maximum]."""
    if limit is None:
        return default
    return max(1, min(limit, maximum))

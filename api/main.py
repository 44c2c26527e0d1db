"""
Update-Priority Scoreboard API

FastAPI application that:
1. Proxies Search Console and GA4 page data for the dashboard
2. Memoizes every upstream response in an in-memory TTL cache
3. Serves the ranked list of pages needing an update
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from src.cache import TTLCache
from src.collector import AnalyticsDataClient, RetryConfig, SearchConsoleClient
from src.services import ScoreboardService
from src.utils.config import Settings, get_settings
from src.utils.dates import DateRangeError

from api import cache as cache_routes
from api import ga4 as ga4_routes
from api import gsc as gsc_routes
from api import scoreboard as scoreboard_routes
from api.dependencies import get_app_settings
from api.errors import date_range_error_handler, request_validation_error_handler


logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    # Log to stdout; stderr is treated as errors by most PaaS log collectors
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True,
    )

    # Quiet down chatty loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def create_app(
    settings: Optional[Settings] = None,
    cache: Optional[TTLCache] = None,
    search_provider=None,
    analytics_provider=None,
) -> FastAPI:
    """
    Build the application and its collaborators.

    Args:
        settings: Configuration (defaults to environment settings)
        cache: Shared cache (a fresh TTLCache by default)
        search_provider: Search Console provider (built from settings by default)
        analytics_provider: GA4 provider (built from settings by default)
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Update-Priority Scoreboard",
        description="Search Console and GA4 page data with update-priority scoring",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    retry_config = RetryConfig(max_retries=settings.MAX_RETRIES)
    cache = cache if cache is not None else TTLCache()
    search_provider = search_provider or SearchConsoleClient(
        site_url=settings.GSC_SITE_URL,
        access_token=settings.GOOGLE_ACCESS_TOKEN,
        retry_config=retry_config,
        timeout=settings.API_TIMEOUT,
    )
    analytics_provider = analytics_provider or AnalyticsDataClient(
        property_id=settings.GA4_PROPERTY_ID,
        access_token=settings.GOOGLE_ACCESS_TOKEN,
        retry_config=retry_config,
        timeout=settings.API_TIMEOUT,
    )

    app.state.settings = settings
    app.state.cache = cache
    app.state.search_provider = search_provider
    app.state.analytics_provider = analytics_provider
    app.state.scoreboard_service = ScoreboardService.from_settings(
        settings, search_provider, analytics_provider, cache
    )

    app.add_exception_handler(DateRangeError, date_range_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(scoreboard_routes.router)
    app.include_router(gsc_routes.router)
    app.include_router(ga4_routes.router)
    app.include_router(cache_routes.router)

    @app.get("/api/health")
    async def health(settings: Settings = Depends(get_app_settings)):
        """Configuration overview for monitoring."""
        return {
            "ok": True,
            "mode": settings.mode,
            "siteUrlConfigured": bool(settings.GSC_SITE_URL),
            "ga4PropertyConfigured": bool(settings.GA4_PROPERTY_ID),
            "cacheTtlSeconds": settings.CACHE_TTL_SECONDS,
            "trendSource": settings.trend_source,
            "timestamp": datetime.now().isoformat(),
        }

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close provider HTTP clients."""
        for provider in (app.state.search_provider, app.state.analytics_provider):
            close = getattr(provider, "close", None)
            if close is not None:
                await close()

    logger.info(
        f"Scoreboard API ready (mode={settings.mode}, cache_ttl={settings.CACHE_TTL_SECONDS}s, "
        f"trends={settings.trend_source})"
    )
    return app

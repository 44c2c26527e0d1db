"""
Cache Management API

Provides endpoints for cache monitoring and manual operations.

Endpoints:
- Statistics for dashboard insights
- Manual clear (development, or after changing Google properties)
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.cache import TTLCache

from api.dependencies import get_cache


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cache", tags=["Cache Management"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class CacheStatsResponse(BaseModel):
    """Cache statistics response."""
    totalEntries: int = Field(..., description="Entries currently stored")
    validEntries: int = Field(..., description="Entries not yet expired")
    expiredEntries: int = Field(..., description="Expired entries awaiting lazy removal")
    hits: int = Field(..., description="Lookups served from the cache")
    misses: int = Field(..., description="Lookups that found nothing valid")
    hitRatePercent: float = Field(..., description="hits / (hits + misses), in percent")


class CacheClearResponse(BaseModel):
    """Cache clear response."""
    message: str
    entriesCleared: int


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/stats", response_model=CacheStatsResponse)
def get_cache_stats(cache: TTLCache = Depends(get_cache)):
    """
    Get current cache statistics.

    Note: The cache lives in process memory and is empty after a restart.
    """
    return CacheStatsResponse(**cache.get_stats())


@router.post("/clear", response_model=CacheClearResponse)
def clear_cache(cache: TTLCache = Depends(get_cache)):
    """
    Clear ALL cached provider responses and scoreboards.

    The next request for each endpoint goes back to Google.
    """
    count = cache.clear()
    return CacheClearResponse(message="Cache cleared successfully", entriesCleared=count)

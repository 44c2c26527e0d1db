"""
Scoreboard API

GET /api/scoreboard?start=YYYY-MM-DD&end=YYYY-MM-DD

Ranked list of pages that need an update, highest priority first (at most
100). Responses carry an ETag; a matching If-None-Match gets 304.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Response
from pydantic import BaseModel, Field

from src.cache.headers import add_cache_headers, etags_match, generate_etag
from src.services import ScoreboardService
from src.utils.dates import DateRange

from api.dependencies import get_date_range, get_scoreboard_service
from api.errors import provider_failure


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Scoreboard"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class PriorityMetricsResponse(BaseModel):
    current: float = 0
    previous: float = 0
    delta: float = 0


class PriorityScoreResponse(BaseModel):
    """One page needing attention."""
    pagePath: str = Field(..., description="Normalized page path")
    priority: int = Field(..., description="Sum of the weights of the rules that fired")
    reasons: List[str] = Field(..., description="One entry per rule, in evaluation order")
    metrics: PriorityMetricsResponse


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/scoreboard", response_model=List[PriorityScoreResponse])
async def get_scoreboard(
    response: Response,
    date_range: DateRange = Depends(get_date_range),
    if_none_match: Optional[str] = Header(None),
    service: ScoreboardService = Depends(get_scoreboard_service),
):
    """
    Get the update-priority scoreboard.

    Joins Search Console and GA4 page data for the range, applies the
    priority rules and returns the pages needing attention.
    """
    try:
        scores = await service.get_scoreboard(date_range.start_date, date_range.end_date)
    except Exception as e:
        return provider_failure("SCOREBOARD_ERROR", "/api/scoreboard", e)

    payload = [score.to_dict() for score in scores]
    etag = generate_etag(payload)
    if etags_match(if_none_match, etag):
        return Response(status_code=304, headers={"ETag": etag})

    add_cache_headers(response, service.ttl_seconds, etag)
    return payload

"""
Search Console Provider

Wraps the searchAnalytics/query endpoint. Without a site URL or token the
provider runs in mock mode and returns empty row sets.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from src.models import DailySearchStats, PageSearchStats, QueryStats
from .client import GoogleAPIClient, RetryConfig

logger = logging.getLogger(__name__)


class SearchConsoleClient:
    """
    Search Console data provider.

    Usage:
        gsc = SearchConsoleClient(site_url="https://example.com/", access_token=token)
        pages = await gsc.get_top_pages("2024-01-01", "2024-01-28", limit=1000)
        await gsc.close()
    """

    BASE_URL = "https://www.googleapis.com/webmasters/v3"

    def __init__(
        self,
        site_url: str,
        access_token: Optional[str],
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.site_url = site_url
        self._client: Optional[GoogleAPIClient] = None

        if site_url and access_token:
            self._client = GoogleAPIClient(
                base_url=self.BASE_URL,
                access_token=access_token,
                retry_config=retry_config,
                timeout=timeout,
                transport=transport,
            )
        else:
            logger.info("Search Console not configured - running in mock mode")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def _query_path(self) -> str:
        return f"/sites/{quote(self.site_url, safe='')}/searchAnalytics/query"

    async def _query(self, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run a searchAnalytics query and return its rows."""
        if not self.enabled:
            return []
        body = {"type": "web", "dataState": "final", **body}
        data = await self._client.post(self._query_path, body)
        return data.get("rows") or []

    @staticmethod
    def _row_fields(row: Dict[str, Any], dimension: str) -> Dict[str, Any]:
        keys = row.get("keys") or [""]
        return {
            dimension: keys[0],
            "clicks": row.get("clicks"),
            "impressions": row.get("impressions"),
            "ctr": row.get("ctr"),
            "position": row.get("position"),
        }

    async def get_top_pages(self, start_date: str, end_date: str, limit: int = 1000) -> List[PageSearchStats]:
        """Pages ordered by impressions (highest first)."""
        rows = await self._query({
            "startDate": start_date,
            "endDate": end_date,
            "dimensions": ["page"],
            "rowLimit": limit,
            "orderBy": [{"field": "impressions", "descending": True}],
        })
        pages = [PageSearchStats.from_dict(self._row_fields(r, "page")) for r in rows]
        pages.sort(key=lambda p: p.impressions, reverse=True)
        logger.debug(f"GSC returned {len(pages)} pages for {start_date}..{end_date}")
        return pages[:limit]

    async def get_queries_for_page(
        self,
        start_date: str,
        end_date: str,
        page_url: str,
        limit: int = 50,
    ) -> List[QueryStats]:
        """Top queries that surfaced one page."""
        rows = await self._query({
            "startDate": start_date,
            "endDate": end_date,
            "dimensions": ["query"],
            "rowLimit": limit,
            "dimensionFilterGroups": [{
                "filters": [{"dimension": "page", "operator": "equals", "expression": page_url}],
            }],
            "orderBy": [{"field": "impressions", "descending": True}],
        })
        queries = [QueryStats.from_dict(self._row_fields(r, "query")) for r in rows]
        queries.sort(key=lambda q: q.impressions, reverse=True)
        return queries[:limit]

    async def get_daily(self, start_date: str, end_date: str) -> List[DailySearchStats]:
        """Site-wide totals per day, oldest first."""
        rows = await self._query({
            "startDate": start_date,
            "endDate": end_date,
            "dimensions": ["date"],
            "rowLimit": 1000,
        })
        days = [DailySearchStats.from_dict(self._row_fields(r, "date")) for r in rows]
        return sorted(days, key=lambda d: d.date)

    async def close(self):
        if self._client is not None:
            await self._client.close()

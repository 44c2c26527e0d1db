"""
GA4 Provider

Wraps the Analytics Data API runReport endpoint. Metric values arrive as
strings and are coerced by the models' ingestion helpers. Without a
property id or token the provider runs in mock mode.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from src.models import (
    DailyPageStats,
    PageEngagementStats,
    SiteMetrics,
    to_count,
    to_number,
)
from .client import GoogleAPIClient, RetryConfig

logger = logging.getLogger(__name__)

PAGE_METRICS = ["sessions", "engagedSessions", "averageSessionDuration", "conversions"]
SITE_METRICS = PAGE_METRICS + ["bounceRate"]


def _iso_date(value: str) -> str:
    """GA4 reports the date dimension as YYYYMMDD."""
    if len(value) == 8 and value.isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:]}"
    return value


class AnalyticsDataClient:
    """
    GA4 data provider.

    Usage:
        ga4 = AnalyticsDataClient(property_id="123456", access_token=token)
        pages = await ga4.get_pages_aggregate("2024-01-01", "2024-01-28")
        await ga4.close()
    """

    BASE_URL = "https://analyticsdata.googleapis.com/v1beta"

    def __init__(
        self,
        property_id: str,
        access_token: Optional[str],
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.property_id = property_id
        self._client: Optional[GoogleAPIClient] = None

        if property_id and access_token:
            self._client = GoogleAPIClient(
                base_url=self.BASE_URL,
                access_token=access_token,
                retry_config=retry_config,
                timeout=timeout,
                transport=transport,
            )
        else:
            logger.info("GA4 not configured - running in mock mode")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def _run_report(self, body: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Run a report and flatten each row into {dimension/metric name: value}.
        """
        if not self.enabled:
            return []

        data = await self._client.post(f"/properties/{self.property_id}:runReport", body)

        dimension_names = [
            h.get("name") for h in data.get("dimensionHeaders")
            or [{"name": d["name"]} for d in body.get("dimensions", [])]
        ]
        metric_names = [
            h.get("name") for h in data.get("metricHeaders")
            or [{"name": m["name"]} for m in body.get("metrics", [])]
        ]

        flattened = []
        for row in data.get("rows") or []:
            record: Dict[str, Any] = {}
            for name, value in zip(dimension_names, row.get("dimensionValues") or []):
                record[name] = value.get("value", "")
            for name, value in zip(metric_names, row.get("metricValues") or []):
                record[name] = value.get("value")
            flattened.append(record)
        return flattened

    async def get_pages_aggregate(self, start_date: str, end_date: str) -> List[PageEngagementStats]:
        """One row per page path over the window."""
        rows = await self._run_report({
            "dateRanges": [{"startDate": start_date, "endDate": end_date}],
            "dimensions": [{"name": "pagePath"}],
            "metrics": [{"name": m} for m in PAGE_METRICS],
            "limit": "100000",
        })
        pages = [PageEngagementStats.from_dict(r) for r in rows]
        logger.debug(f"GA4 returned {len(pages)} pages for {start_date}..{end_date}")
        return pages

    async def get_pages_by_day(
        self,
        start_date: str,
        end_date: str,
        limit: int = 100000,
    ) -> List[DailyPageStats]:
        """One row per (day, page path)."""
        rows = await self._run_report({
            "dateRanges": [{"startDate": start_date, "endDate": end_date}],
            "dimensions": [{"name": "date"}, {"name": "pagePath"}],
            "metrics": [{"name": m} for m in PAGE_METRICS],
            "limit": str(limit),
        })
        results = []
        for r in rows:
            page = PageEngagementStats.from_dict(r)
            results.append(DailyPageStats(
                date=_iso_date(str(r.get("date") or "")),
                page_path=page.page_path,
                sessions=page.sessions,
                engaged_sessions=page.engaged_sessions,
                average_session_duration=page.average_session_duration,
                conversions=page.conversions,
            ))
        return results

    async def get_site_metrics(self, start_date: str, end_date: str) -> SiteMetrics:
        """Site totals; all zeros when GA4 returns no rows."""
        rows = await self._run_report({
            "dateRanges": [{"startDate": start_date, "endDate": end_date}],
            "metrics": [{"name": m} for m in SITE_METRICS],
        })
        if not rows:
            return SiteMetrics()

        row = rows[0]
        return SiteMetrics(
            total_sessions=to_count(row.get("sessions")),
            total_engaged_sessions=to_count(row.get("engagedSessions")),
            average_session_duration=to_number(row.get("averageSessionDuration")),
            total_conversions=to_count(row.get("conversions")),
            bounce_rate=to_number(row.get("bounceRate")),
        )

    async def close(self):
        if self._client is not None:
            await self._client.close()

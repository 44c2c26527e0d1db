"""
Data Providers

Async clients for the two external data sources:
- SearchConsoleClient: top pages, queries per page, daily totals
- AnalyticsDataClient: GA4 page aggregates, pages by day, site totals

Both share GoogleAPIClient (bearer auth, retry, ProviderError) and fall back
to empty results when their property or token is not configured.
"""

from .client import GoogleAPIClient, ProviderError, RetryConfig
from .gsc import SearchConsoleClient
from .ga4 import AnalyticsDataClient

__all__ = [
    "GoogleAPIClient",
    "ProviderError",
    "RetryConfig",
    "SearchConsoleClient",
    "AnalyticsDataClient",
]

"""
API Tests

Exercises the HTTP layer with fake providers:
- Scoreboard payload, cache headers and 304 revalidation
- Error envelopes (400 for bad input, 500 for provider failures)
- Search Console, GA4 and cache management routes
"""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from src.cache import TTLCache
from src.collector import ProviderError
from src.models import DailySearchStats, QueryStats, SiteMetrics
from src.utils.config import Settings

from tests.conftest import FakeAnalyticsProvider, FakeSearchProvider


RANGE = "start=2024-01-01&end=2024-01-28"


def make_settings(**overrides) -> Settings:
    values = {
        "GSC_SITE_URL": "",
        "GA4_PROPERTY_ID": "",
        "GOOGLE_ACCESS_TOKEN": None,
        "TREND_SOURCE": "none",
        "CACHE_TTL_SECONDS": 900,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def api_cache():
    return TTLCache()


@pytest.fixture
def client(search_provider, analytics_provider, api_cache):
    app = create_app(
        settings=make_settings(),
        cache=api_cache,
        search_provider=search_provider,
        analytics_provider=analytics_provider,
    )
    return TestClient(app)


def failing_client(error=None):
    error = error or ProviderError("quota exceeded", status_code=429)
    app = create_app(
        settings=make_settings(),
        cache=TTLCache(),
        search_provider=FakeSearchProvider(error=error),
        analytics_provider=FakeAnalyticsProvider(error=error),
    )
    return TestClient(app)


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:
    """Test the configuration overview."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["mode"] == "mock"
        assert data["siteUrlConfigured"] is False
        assert data["ga4PropertyConfigured"] is False
        assert data["cacheTtlSeconds"] == 900
        assert data["trendSource"] == "none"
        assert "timestamp" in data


# =============================================================================
# SCOREBOARD
# =============================================================================

class TestScoreboardEndpoint:
    """Test GET /api/scoreboard."""

    def test_returns_ranked_pages(self, client):
        response = client.get(f"/api/scoreboard?{RANGE}")

        assert response.status_code == 200
        data = response.json()
        assert [(row["pagePath"], row["priority"]) for row in data] == [
            ("/pricing", 90),
            ("/blog/old-post", 25),
            ("/features", 15),
        ]
        assert data[0]["reasons"][0] == "High impressions, low CTR → optimize meta description"
        assert data[0]["metrics"] == {"current": 0, "previous": 0, "delta": 0}

    def test_cache_headers(self, client):
        response = client.get(f"/api/scoreboard?{RANGE}")

        assert response.headers["Cache-Control"] == "private, max-age=900"
        assert response.headers["ETag"].startswith('"')

    def test_not_modified(self, client):
        etag = client.get(f"/api/scoreboard?{RANGE}").headers["ETag"]

        response = client.get(f"/api/scoreboard?{RANGE}", headers={"If-None-Match": etag})

        assert response.status_code == 304
        assert response.headers["ETag"] == etag

    def test_stale_etag_gets_full_response(self, client):
        response = client.get(f"/api/scoreboard?{RANGE}", headers={"If-None-Match": '"stale"'})
        assert response.status_code == 200

    def test_result_is_cached(self, client, search_provider, api_cache):
        client.get(f"/api/scoreboard?{RANGE}")
        client.get(f"/api/scoreboard?{RANGE}")

        assert len(search_provider.calls) == 2  # current + previous, once
        assert api_cache.get("scoreboard:2024-01-01:2024-01-28") is not None

    def test_default_range(self, client, search_provider):
        response = client.get("/api/scoreboard")

        assert response.status_code == 200
        start, end = search_provider.calls[0][1:3]
        assert start < end

    def test_start_not_before_end(self, client):
        response = client.get("/api/scoreboard?start=2024-01-28&end=2024-01-01")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"

    def test_malformed_date(self, client):
        response = client.get("/api/scoreboard?start=January&end=2024-01-28")

        assert response.status_code == 400
        assert response.json() == {
            "error": {"code": "INVALID_DATE_RANGE", "message": "Invalid date 'January'. Use YYYY-MM-DD"},
        }

    def test_provider_failure(self):
        response = failing_client().get(f"/api/scoreboard?{RANGE}")

        assert response.status_code == 500
        assert response.json() == {"error": {"code": "SCOREBOARD_ERROR", "message": "quota exceeded"}}


# =============================================================================
# SEARCH CONSOLE
# =============================================================================

class TestSearchConsoleEndpoints:
    """Test /api/gsc routes."""

    def test_top_pages(self, client, search_provider):
        response = client.get(f"/api/gsc/top?{RANGE}")

        assert response.status_code == 200
        data = response.json()
        assert data[0] == {
            "page": "https://example.com/pricing/",
            "clicks": 20,
            "impressions": 2000,
            "ctr": 0.01,
            "position": 3.0,
        }
        assert search_provider.calls[0] == ("top", "2024-01-01", "2024-01-28", 200)
        assert response.headers["Cache-Control"] == "private, max-age=900"

    @pytest.mark.parametrize("limit,expected", [("0", 1), ("-5", 1), ("2", 2), ("99999", 5000)])
    def test_limit_is_clamped(self, client, search_provider, limit, expected):
        client.get(f"/api/gsc/top?{RANGE}&limit={limit}")
        assert search_provider.calls[0][3] == expected

    def test_top_pages_cached(self, client, search_provider):
        client.get(f"/api/gsc/top?{RANGE}")
        client.get(f"/api/gsc/top?{RANGE}")
        assert len(search_provider.calls) == 1

    @pytest.mark.parametrize("path", ["/api/gsc/top?limit=abc", "/api/gsc/queries?page=/a&limit=1.5"])
    def test_malformed_limit(self, client, search_provider, path):
        response = client.get(path)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_PARAMETER"
        assert "limit" in error["message"]
        assert search_provider.calls == []

    def test_queries_require_page(self, client):
        response = client.get(f"/api/gsc/queries?{RANGE}")

        assert response.status_code == 400
        assert response.json() == {
            "error": {"code": "MISSING_PAGE_PARAM", "message": "Page parameter is required"},
        }

    def test_queries(self, search_provider, analytics_provider):
        search_provider.queries = [QueryStats(query="pricing plans", clicks=3, impressions=90, ctr=0.03, position=4.0)]
        client = TestClient(create_app(
            settings=make_settings(),
            cache=TTLCache(),
            search_provider=search_provider,
            analytics_provider=analytics_provider,
        ))

        response = client.get(f"/api/gsc/queries?{RANGE}&page=https://example.com/pricing")

        assert response.status_code == 200
        assert response.json()[0]["query"] == "pricing plans"
        assert search_provider.calls[0] == (
            "queries", "2024-01-01", "2024-01-28", "https://example.com/pricing", 50,
        )

    def test_daily(self, search_provider, analytics_provider):
        search_provider.daily = [DailySearchStats(date="2024-01-01", clicks=5, impressions=50)]
        client = TestClient(create_app(
            settings=make_settings(),
            cache=TTLCache(),
            search_provider=search_provider,
            analytics_provider=analytics_provider,
        ))

        response = client.get(f"/api/gsc/daily?{RANGE}")

        assert response.status_code == 200
        assert response.json() == [
            {"date": "2024-01-01", "clicks": 5, "impressions": 50, "ctr": None, "position": None},
        ]

    @pytest.mark.parametrize("path,code", [
        ("/api/gsc/top", "GSC_TOP_ERROR"),
        ("/api/gsc/queries?page=/a&", "GSC_QUERIES_ERROR"),
        ("/api/gsc/daily", "GSC_DAILY_ERROR"),
    ])
    def test_provider_failures(self, path, code):
        separator = "" if path.endswith("&") else "?"
        response = failing_client().get(f"{path}{separator}{RANGE}")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == code

    def test_failure_is_not_cached(self, search_provider, analytics_provider):
        cache = TTLCache()
        search_provider.error = ProviderError("network down")
        client = TestClient(create_app(
            settings=make_settings(),
            cache=cache,
            search_provider=search_provider,
            analytics_provider=analytics_provider,
        ))

        assert client.get(f"/api/gsc/top?{RANGE}").status_code == 500
        assert len(cache) == 0

        search_provider.error = None
        assert client.get(f"/api/gsc/top?{RANGE}").status_code == 200


# =============================================================================
# GA4
# =============================================================================

class TestGA4Endpoints:
    """Test /api/ga4 routes."""

    def test_pages(self, client):
        response = client.get(f"/api/ga4/pages?{RANGE}")

        assert response.status_code == 200
        assert response.json()[0] == {
            "pagePath": "/pricing",
            "sessions": 150,
            "engagedSessions": 60,
            "averageSessionDuration": 20.0,
            "conversions": 0,
        }

    def test_metrics(self, search_provider):
        analytics = FakeAnalyticsProvider(metrics=SiteMetrics(total_sessions=1000, bounce_rate=0.4))
        client = TestClient(create_app(
            settings=make_settings(),
            cache=TTLCache(),
            search_provider=search_provider,
            analytics_provider=analytics,
        ))

        response = client.get(f"/api/ga4/metrics?{RANGE}")

        assert response.status_code == 200
        assert response.json() == {
            "totalSessions": 1000,
            "totalEngagedSessions": 0,
            "averageSessionDuration": 0.0,
            "totalConversions": 0,
            "bounceRate": 0.4,
        }

    @pytest.mark.parametrize("path,code", [
        ("/api/ga4/pages", "GA4_PAGES_ERROR"),
        ("/api/ga4/metrics", "GA4_METRICS_ERROR"),
    ])
    def test_provider_failures(self, path, code):
        response = failing_client().get(f"{path}?{RANGE}")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == code

    def test_invalid_range(self, client):
        response = client.get("/api/ga4/pages?start=2024-02-01&end=2024-01-01")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"


# =============================================================================
# CACHE MANAGEMENT
# =============================================================================

class TestCacheEndpoints:
    """Test /api/cache routes."""

    def test_stats(self, client):
        client.get(f"/api/gsc/top?{RANGE}")
        client.get(f"/api/scoreboard?{RANGE}")

        response = client.get("/api/cache/stats")

        assert response.status_code == 200
        assert response.json() == {
            "totalEntries": 2,
            "validEntries": 2,
            "expiredEntries": 0,
            "hits": 0,
            "misses": 2,
            "hitRatePercent": 0.0,
        }

    def test_stats_count_hits(self, client):
        client.get(f"/api/gsc/top?{RANGE}")
        client.get(f"/api/gsc/top?{RANGE}")

        data = client.get("/api/cache/stats").json()

        assert (data["hits"], data["misses"]) == (1, 1)
        assert data["hitRatePercent"] == 50.0

    def test_clear(self, client, search_provider):
        client.get(f"/api/scoreboard?{RANGE}")

        response = client.post("/api/cache/clear")

        assert response.status_code == 200
        assert response.json() == {"message": "Cache cleared successfully", "entriesCleared": 1}
        assert client.get("/api/cache/stats").json()["totalEntries"] == 0

        client.get(f"/api/scoreboard?{RANGE}")
        assert len(search_provider.calls) == 4

"""
Tests for rolling window trends.
"""

from datetime import date, timedelta

from src.models import DailyPageStats, PageEngagementStats, TrendWindow
from src.scoring import build_page_trends, build_period_trends, index_by_key, rolling_sums


def daily(day, page, sessions):
    return DailyPageStats(date=day, page_path=page, sessions=sessions)


class TestRollingSums:
    """Test current/previous window sums over a daily series."""

    def test_windows(self):
        rows = [
            {"date": "2024-01-03", "value": 3},
            {"date": "2024-01-01", "value": 1},
            {"date": "2024-01-04", "value": 4},
            {"date": "2024-01-02", "value": 2},
        ]

        assert rolling_sums(rows, window_days=2) == [
            TrendWindow(date="2024-01-03", current=5, previous=1),
            TrendWindow(date="2024-01-04", current=7, previous=3),
        ]

    def test_not_enough_history(self):
        rows = [{"date": f"2024-01-0{i}", "value": i} for i in range(1, 4)]
        assert rolling_sums(rows, window_days=3) == []
        assert rolling_sums(rows, window_days=5) == []
        assert rolling_sums([], window_days=28) == []

    def test_full_previous_window(self):
        start = date(2024, 1, 1)
        rows = [{"date": (start + timedelta(days=i)).isoformat(), "value": 1} for i in range(56)]
        windows = rolling_sums(rows, window_days=28)

        assert len(windows) == 28
        assert windows[-1] == TrendWindow(date="2024-02-25", current=28, previous=28)
        assert windows[0].current == 28
        assert windows[0].previous == 1  # truncated at the start of the series

    def test_custom_metric_and_missing_values(self):
        rows = [
            {"date": "2024-01-01", "clicks": 10},
            {"date": "2024-01-02"},
            {"date": "2024-01-03", "clicks": None},
            {"date": "2024-01-04", "clicks": 6},
        ]
        windows = rolling_sums(rows, window_days=2, metric="clicks")
        assert windows[-1] == TrendWindow(date="2024-01-04", current=6, previous=10)

    def test_zero_window(self):
        assert rolling_sums([{"date": "2024-01-01", "value": 1}], window_days=0) == []


class TestPageTrends:
    """Test per-page trends from GA4 pages-by-day rows."""

    def test_latest_window_per_page(self):
        rows = [
            daily("2024-01-01", "/a", 10),
            daily("2024-01-02", "/a/", 10),
            daily("2024-01-03", "/a", 5),
            daily("2024-01-04", "/a", 5),
        ]
        trends = build_page_trends(rows, window_days=2)

        assert trends == [TrendWindow(date="2024-01-04", current=10, previous=20, key="/a")]

    def test_missing_days_are_zero(self):
        rows = [
            daily("2024-01-01", "/a", 1),
            daily("2024-01-02", "/a", 1),
            daily("2024-01-03", "/a", 1),
            daily("2024-01-04", "/a", 1),
            daily("2024-01-01", "/b", 3),
        ]
        trends = {t.key: t for t in build_page_trends(rows, window_days=2)}

        assert trends["/b"].current == 0
        assert trends["/b"].previous == 3
        assert trends["/b"].date == "2024-01-04"

    def test_other_metric(self):
        rows = [
            DailyPageStats(date=f"2024-01-0{i}", page_path="/a", sessions=1, conversions=i)
            for i in range(1, 5)
        ]
        trend = build_page_trends(rows, window_days=2, metric="conversions")[0]
        assert (trend.current, trend.previous) == (7, 3)

    def test_short_series_produces_nothing(self):
        assert build_page_trends([daily("2024-01-01", "/a", 5)], window_days=28) == []


class TestPeriodTrends:
    """Test trends from two aggregate periods."""

    def test_union_of_pages(self):
        current = [
            PageEngagementStats(page_path="/a", sessions=100),
            PageEngagementStats(page_path="/b", sessions=50),
        ]
        previous = [
            PageEngagementStats(page_path="/a/", sessions=200),
            PageEngagementStats(page_path="/c", sessions=10),
        ]
        trends = build_period_trends(current, previous, end_date="2024-01-28")

        assert trends == [
            TrendWindow(date="2024-01-28", current=100, previous=200, key="/a"),
            TrendWindow(date="2024-01-28", current=50, previous=0, key="/b"),
            TrendWindow(date="2024-01-28", current=0, previous=10, key="/c"),
        ]


class TestIndexByKey:
    """Test trend lookup by page key."""

    def test_skips_unkeyed_and_last_wins(self):
        windows = [
            TrendWindow(date="d", current=1, previous=1),
            TrendWindow(date="d", current=1, previous=1, key="/a"),
            TrendWindow(date="d", current=2, previous=2, key="https://example.com/a/"),
        ]
        indexed = index_by_key(windows)

        assert list(indexed) == ["/a"]
        assert indexed["/a"].current == 2

    def test_none(self):
        assert index_by_key(None) == {}

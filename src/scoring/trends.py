"""
Rolling Window Trends

Compares each window of N daily values with the N days before it:

    days:      d1 ... dN | dN+1 ... d2N
               previous  |  current        -> TrendWindow(date=d2N, ...)

Windows are recomputed from scratch on every call; nothing is persisted.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from src.models import DailyPageStats, PageEngagementStats, TrendWindow
from src.utils.paths import normalize_page_path

logger = logging.getLogger(__name__)


def rolling_sums(
    daily_rows: Iterable[Mapping[str, Any]],
    window_days: int = 28,
    metric: str = "value",
) -> List[TrendWindow]:
    """
    Current/previous window sums for every day with a full current window.

    Args:
        daily_rows: Rows with a "date" (YYYY-MM-DD) and a numeric `metric`;
            any order, they are sorted here
        window_days: Window length in rows (one row per day)
        metric: Name of the value field in each row

    Returns:
        One TrendWindow per row at index >= window_days. The previous window
        is the window_days rows just before the current one, truncated at
        the start of the series. Empty if there is not enough history.
    """
    if window_days <= 0:
        return []

    rows = sorted(daily_rows, key=lambda r: r["date"])
    values = [row.get(metric) or 0 for row in rows]

    results = []
    for i in range(window_days, len(rows)):
        current = sum(values[i - window_days + 1:i + 1])
        previous_start = max(0, i - 2 * window_days + 1)
        previous = sum(values[previous_start:i - window_days + 1])
        results.append(TrendWindow(date=rows[i]["date"], current=current, previous=previous))

    return results


def build_page_trends(
    daily_rows: Iterable[DailyPageStats],
    window_days: int = 28,
    metric: str = "sessions",
) -> List[TrendWindow]:
    """
    Latest rolling window per page from GA4 pages-by-day rows.

    GA4 omits days on which a page had no traffic, so each page's series is
    padded with zeros over every date seen in the input before windowing.

    Returns:
        One TrendWindow per page (keyed by normalized path), for pages with
        enough history
    """
    by_page: Dict[str, Dict[str, float]] = defaultdict(dict)
    all_dates = set()

    for row in daily_rows:
        key = normalize_page_path(row.page_path)
        all_dates.add(row.date)
        by_page[key][row.date] = by_page[key].get(row.date, 0) + row.metric(metric)

    trends = []
    dates = sorted(all_dates)
    for key, values in by_page.items():
        series = [{"date": day, "value": values.get(day, 0)} for day in dates]
        windows = rolling_sums(series, window_days=window_days)
        if windows:
            latest = windows[-1]
            trends.append(TrendWindow(
                date=latest.date,
                current=latest.current,
                previous=latest.previous,
                key=key,
            ))

    logger.debug(f"Built {len(trends)} page trends from {len(dates)} days of data")
    return trends


def build_period_trends(
    current_rows: Iterable[PageEngagementStats],
    previous_rows: Iterable[PageEngagementStats],
    end_date: str,
    metric: str = "sessions",
) -> List[TrendWindow]:
    """
    One window per page comparing two aggregate periods.

    Pages present in only one period get 0 for the other.
    """
    current = _period_totals(current_rows, metric)
    previous = _period_totals(previous_rows, metric)

    keys = list(dict.fromkeys([*current.keys(), *previous.keys()]))
    return [
        TrendWindow(
            date=end_date,
            current=current.get(key, 0),
            previous=previous.get(key, 0),
            key=key,
        )
        for key in keys
    ]


def _period_totals(rows: Iterable[PageEngagementStats], metric: str) -> Dict[str, float]:
    attribute = {
        "sessions": "sessions",
        "engagedSessions": "engaged_sessions",
        "averageSessionDuration": "average_session_duration",
        "conversions": "conversions",
    }.get(metric, "sessions")

    totals: Dict[str, float] = {}
    for row in rows:
        totals[normalize_page_path(row.page_path)] = getattr(row, attribute)
    return totals


def index_by_key(windows: Optional[Iterable[TrendWindow]]) -> Dict[str, TrendWindow]:
    """Map trend windows by normalized page key (last one wins)."""
    indexed: Dict[str, TrendWindow] = {}
    for window in windows or []:
        if window.key is None:
            continue
        indexed[normalize_page_path(window.key)] = window
    return indexed

#!/usr/bin/env python3
"""
Scoreboard Runner

Computes the update-priority scoreboard once and prints it, without
starting the API.

Usage:
    # Set environment variables first (or put them in .env):
    export GSC_SITE_URL=https://example.com/
    export GA4_PROPERTY_ID=123456789
    export GOOGLE_ACCESS_TOKEN=ya29....

    # Last 28 days:
    python scripts/run_scoreboard.py

    # Explicit range, with GA4 trend rules:
    python scripts/run_scoreboard.py --start 2024-01-01 --end 2024-01-28 --trends daily
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run_scoreboard(start: str = None, end: str = None, trends: str = None, top: int = 25):
    """Fetch, score and print the top pages."""

    load_dotenv()

    from src.cache import TTLCache
    from src.collector import AnalyticsDataClient, ProviderError, SearchConsoleClient
    from src.scoring import format_number
    from src.services import ScoreboardService
    from src.utils import get_settings, resolve_date_range

    settings = get_settings()
    if settings.mode == "mock":
        print("WARNING: GOOGLE_ACCESS_TOKEN and GSC_SITE_URL/GA4_PROPERTY_ID not set - "
              "providers return no data")

    date_range = resolve_date_range(start, end, default_days=settings.DEFAULT_RANGE_DAYS)

    gsc = SearchConsoleClient(settings.GSC_SITE_URL, settings.GOOGLE_ACCESS_TOKEN, timeout=settings.API_TIMEOUT)
    ga4 = AnalyticsDataClient(settings.GA4_PROPERTY_ID, settings.GOOGLE_ACCESS_TOKEN, timeout=settings.API_TIMEOUT)
    service = ScoreboardService.from_settings(settings, gsc, ga4, TTLCache())
    if trends:
        service.trend_source = trends

    print(f"\n{'='*70}")
    print("UPDATE PRIORITY SCOREBOARD")
    print(f"{'='*70}")
    print(f"Range:        {date_range.start_date} .. {date_range.end_date} (span {date_range.days} days)")
    print(f"Previous:     {service.previous_period().start_date} .. {service.previous_period().end_date}")
    print(f"Trends:       {service.trend_source}")
    print(f"{'='*70}\n")

    try:
        scores = await service.get_scoreboard(date_range.start_date, date_range.end_date)
    except ProviderError as e:
        logger.error(f"Scoreboard failed: {e}")
        return 1
    finally:
        await gsc.close()
        await ga4.close()

    if not scores:
        print("No pages need attention.")
        return 0

    for rank, score in enumerate(scores[:top], 1):
        trend = ""
        if score.metrics.current or score.metrics.previous:
            trend = (f"  [{format_number(score.metrics.previous)} -> "
                     f"{format_number(score.metrics.current)}]")
        print(f"{rank:>3}. {score.priority:>4}  {score.page_path}{trend}")
        for reason in score.reasons:
            print(f"            - {reason}")

    print(f"\n{len(scores)} pages flagged, showing {min(top, len(scores))}.")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Print the update-priority scoreboard")
    parser.add_argument("--start", help="Range start (YYYY-MM-DD)")
    parser.add_argument("--end", help="Range end (YYYY-MM-DD)")
    parser.add_argument("--trends", choices=["none", "period", "daily"], help="Trend source override")
    parser.add_argument("--top", type=int, default=25, help="Rows to print")
    args = parser.parse_args()

    sys.exit(asyncio.run(run_scoreboard(args.start, args.end, args.trends, args.top)))


if __name__ == "__main__":
    main()

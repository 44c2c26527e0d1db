"""
Date Range Helpers

Reporting windows are passed around as ISO dates (YYYY-MM-DD), the format
both Google APIs accept.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional


DATE_FORMAT = "%Y-%m-%d"


class DateRangeError(ValueError):
    """Raised when a requested date range is malformed."""


@dataclass(frozen=True)
class DateRange:
    """Inclusive reporting window."""
    start_date: str
    end_date: str

    @property
    def days(self) -> int:
        return (parse_date(self.end_date) - parse_date(self.start_date)).days


def format_date(value: date) -> str:
    """Format a date for API calls."""
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, raising DateRangeError on bad input."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise DateRangeError(f"Invalid date '{value}'. Use YYYY-MM-DD")


def get_date_range(days: int, today: Optional[date] = None) -> DateRange:
    """Trailing window: `days` days ago until today."""
    end = today or date.today()
    start = end - timedelta(days=days)
    return DateRange(format_date(start), format_date(end))


def get_offset_range(
    start_days_ago: int,
    end_days_ago: int,
    today: Optional[date] = None,
) -> DateRange:
    """Window between two offsets counted back from today."""
    today = today or date.today()
    return DateRange(
        format_date(today - timedelta(days=start_days_ago)),
        format_date(today - timedelta(days=end_days_ago)),
    )


def resolve_date_range(
    start: Optional[str],
    end: Optional[str],
    default_days: int = 28,
    today: Optional[date] = None,
) -> DateRange:
    """
    Resolve request parameters into a validated range.

    Each bound falls back to the trailing `default_days` window on its own.

    Raises:
        DateRangeError: If a date is malformed or start is not before end
    """
    default = get_date_range(default_days, today=today)
    start_date = start or default.start_date
    end_date = end or default.end_date

    if parse_date(start_date) >= parse_date(end_date):
        raise DateRangeError("Start date must be before end date")

    return DateRange(start_date, end_date)

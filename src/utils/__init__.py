"""Utility modules for the update-priority scoreboard."""

from .config import Settings, get_settings
from .paths import normalize_page_path
from .dates import (
    DateRange,
    DateRangeError,
    format_date,
    parse_date,
    get_date_range,
    get_offset_range,
    resolve_date_range,
)

__all__ = [
    "Settings",
    "get_settings",
    "normalize_page_path",
    # Dates
    "DateRange",
    "DateRangeError",
    "format_date",
    "parse_date",
    "get_date_range",
    "get_offset_range",
    "resolve_date_range",
]

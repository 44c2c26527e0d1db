"""
Scoreboard Data Models

Snapshots returned by the Search Console and GA4 providers, plus the
derived trend windows and priority scores. Provider payloads go through
`from_dict`, which coerces absent or non-numeric fields to fixed defaults so
the scoring code only ever sees well-typed values.

Wire format (to_dict) uses the camelCase field names the dashboard
frontend reads.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# =============================================================================
# COERCION
# =============================================================================

def to_count(value: Any) -> int:
    """Coerce a provider count ("12", 12.0, None) to a non-negative int."""
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError, OverflowError):
        # OverflowError: "Infinity", 1e400
        return 0


def to_number(value: Any) -> float:
    """Coerce a provider measurement to a non-negative float (0.0 if absent)."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


def to_optional_number(value: Any) -> Optional[float]:
    """Coerce to float, keeping absence as None so rules can skip it."""
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


# =============================================================================
# SEARCH CONSOLE
# =============================================================================

@dataclass(frozen=True)
class PageSearchStats:
    """Search performance of one page over a query window."""
    page: str
    clicks: int = 0
    impressions: int = 0
    ctr: Optional[float] = None
    position: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageSearchStats":
        return cls(
            page=str(data.get("page") or ""),
            clicks=to_count(data.get("clicks")),
            impressions=to_count(data.get("impressions")),
            ctr=to_optional_number(data.get("ctr")),
            position=to_optional_number(data.get("position")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "position": self.position,
        }


@dataclass(frozen=True)
class QueryStats:
    """Search performance of one query for a given page."""
    query: str
    clicks: int = 0
    impressions: int = 0
    ctr: Optional[float] = None
    position: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryStats":
        return cls(
            query=str(data.get("query") or ""),
            clicks=to_count(data.get("clicks")),
            impressions=to_count(data.get("impressions")),
            ctr=to_optional_number(data.get("ctr")),
            position=to_optional_number(data.get("position")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "position": self.position,
        }


@dataclass(frozen=True)
class DailySearchStats:
    """Site-wide search totals for one day."""
    date: str
    clicks: int = 0
    impressions: int = 0
    ctr: Optional[float] = None
    position: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailySearchStats":
        return cls(
            date=str(data.get("date") or ""),
            clicks=to_count(data.get("clicks")),
            impressions=to_count(data.get("impressions")),
            ctr=to_optional_number(data.get("ctr")),
            position=to_optional_number(data.get("position")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "clicks": self.clicks,
            "impressions": self.impressions,
            "ctr": self.ctr,
            "position": self.position,
        }


# =============================================================================
# GA4
# =============================================================================

@dataclass(frozen=True)
class PageEngagementStats:
    """GA4 aggregate for one page path."""
    page_path: str
    sessions: int = 0
    engaged_sessions: int = 0
    average_session_duration: float = 0.0
    conversions: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageEngagementStats":
        sessions = to_count(data.get("sessions"))
        return cls(
            page_path=str(data.get("pagePath") or data.get("page_path") or ""),
            sessions=sessions,
            engaged_sessions=min(sessions, to_count(data.get("engagedSessions", data.get("engaged_sessions")))),
            average_session_duration=to_number(
                data.get("averageSessionDuration", data.get("average_session_duration"))
            ),
            conversions=to_count(data.get("conversions")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pagePath": self.page_path,
            "sessions": self.sessions,
            "engagedSessions": self.engaged_sessions,
            "averageSessionDuration": self.average_session_duration,
            "conversions": self.conversions,
        }


@dataclass(frozen=True)
class DailyPageStats:
    """GA4 metrics for one page on one day."""
    date: str
    page_path: str
    sessions: int = 0
    engaged_sessions: int = 0
    average_session_duration: float = 0.0
    conversions: int = 0

    def metric(self, name: str) -> float:
        """Look up a metric by its GA4 name ("sessions", "conversions", ...)."""
        return {
            "sessions": self.sessions,
            "engagedSessions": self.engaged_sessions,
            "averageSessionDuration": self.average_session_duration,
            "conversions": self.conversions,
        }.get(name, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "pagePath": self.page_path,
            "sessions": self.sessions,
            "engagedSessions": self.engaged_sessions,
            "averageSessionDuration": self.average_session_duration,
            "conversions": self.conversions,
        }


@dataclass(frozen=True)
class SiteMetrics:
    """GA4 site totals for a window."""
    total_sessions: int = 0
    total_engaged_sessions: int = 0
    average_session_duration: float = 0.0
    total_conversions: int = 0
    bounce_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSessions": self.total_sessions,
            "totalEngagedSessions": self.total_engaged_sessions,
            "averageSessionDuration": self.average_session_duration,
            "totalConversions": self.total_conversions,
            "bounceRate": self.bounce_rate,
        }


# =============================================================================
# DERIVED
# =============================================================================

@dataclass(frozen=True)
class TrendWindow:
    """Sums of a metric over two adjacent windows ending at `date`."""
    date: str
    current: float
    previous: float
    key: Optional[str] = None  # normalized page path the window belongs to

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "date": self.date,
            "current": self.current,
            "previous": self.previous,
        }


@dataclass(frozen=True)
class PriorityMetrics:
    current: float = 0
    previous: float = 0
    delta: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"current": self.current, "previous": self.previous, "delta": self.delta}


@dataclass
class PriorityScore:
    """A page that needs attention, with the rules that flagged it."""
    page_path: str
    priority: int
    reasons: List[str] = field(default_factory=list)
    metrics: PriorityMetrics = field(default_factory=PriorityMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pagePath": self.page_path,
            "priority": self.priority,
            "reasons": list(self.reasons),
            "metrics": self.metrics.to_dict(),
        }


__all__ = [
    "to_count",
    "to_number",
    "to_optional_number",
    "PageSearchStats",
    "QueryStats",
    "DailySearchStats",
    "PageEngagementStats",
    "DailyPageStats",
    "SiteMetrics",
    "TrendWindow",
    "PriorityMetrics",
    "PriorityScore",
]

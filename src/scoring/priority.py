"""
Update Priority Score

Ranks pages by how urgently they need attention, joining Search Console,
GA4 and (optionally) trend data on the normalized page path.

Rules are evaluated in a fixed order. Each rule that holds adds its weight
and appends its reason:

    #  Source  Condition                                   Weight
    1  GSC     impressions > 1000 and ctr < 2%               +30
    2  GSC     impressions > 500 and position > 10           +25
    3  GSC     position <= 5 and ctr < 3%                    +20
    4  GA4     sessions > 100 and avg duration < 30s         +25
    5  GA4     sessions > 50                                 +15
    6  Trend   change < -20%                                 +35
    7  Trend   |change| < 5% and current window > 100        +10

Trend rules only run when both a current and a previous window exist for
the page. Pages where no rule fires are left out. Priority is an uncapped
sum of weights.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Union

from src.models import (
    PageEngagementStats,
    PageSearchStats,
    PriorityMetrics,
    PriorityScore,
    TrendWindow,
)
from src.utils.paths import normalize_page_path

from .helpers import (
    DECLINE_PERCENT,
    FIRST_PAGE_POSITION,
    HIGH_IMPRESSIONS,
    HIGH_TRAFFIC_SESSIONS,
    LOW_CTR,
    LOW_CTR_TOP_POSITION,
    LOW_ENGAGEMENT_SECONDS,
    MODERATE_IMPRESSIONS,
    RULE_WEIGHTS,
    STAGNANT_MIN_VOLUME,
    STAGNANT_PERCENT,
    TOP_POSITION,
    TRAFFIC_SESSIONS,
    percent_change,
)
from .trends import index_by_key

logger = logging.getLogger(__name__)


@dataclass
class PageRecord:
    """Everything known about one page, merged across sources."""
    page_path: str
    search: Optional[PageSearchStats] = None
    engagement: Optional[PageEngagementStats] = None
    current_trend: Optional[TrendWindow] = None
    previous_trend: Optional[TrendWindow] = None

    @property
    def has_trend(self) -> bool:
        return self.current_trend is not None and self.previous_trend is not None

    @property
    def trend_current(self) -> float:
        return self.current_trend.current if self.current_trend else 0

    @property
    def trend_previous(self) -> float:
        return self.previous_trend.previous if self.previous_trend else 0

    @property
    def trend_change(self) -> float:
        return percent_change(self.trend_current, self.trend_previous)


@dataclass(frozen=True)
class PriorityRule:
    """One additive rule: condition, weight and reason text."""
    name: str
    source: str  # gsc, ga4 or trend
    condition: Callable[[PageRecord], bool]
    reason: Union[str, Callable[[PageRecord], str]]

    @property
    def weight(self) -> int:
        return RULE_WEIGHTS[self.name]

    def applies(self, record: PageRecord) -> bool:
        if self.source == "gsc" and record.search is None:
            return False
        if self.source == "ga4" and record.engagement is None:
            return False
        if self.source == "trend" and not record.has_trend:
            return False
        return self.condition(record)

    def describe(self, record: PageRecord) -> str:
        if callable(self.reason):
            return self.reason(record)
        return self.reason


# ============================================================================
# RULE CONDITIONS
# ============================================================================

def _low_ctr_high_impressions(r: PageRecord) -> bool:
    s = r.search
    return s.impressions > HIGH_IMPRESSIONS and s.ctr is not None and s.ctr < LOW_CTR


def _poor_position_high_impressions(r: PageRecord) -> bool:
    s = r.search
    return (
        s.impressions > MODERATE_IMPRESSIONS
        and s.position is not None
        and s.position > FIRST_PAGE_POSITION
    )


def _low_ctr_top_position(r: PageRecord) -> bool:
    s = r.search
    return (
        s.position is not None
        and s.position <= TOP_POSITION
        and s.ctr is not None
        and s.ctr < LOW_CTR_TOP_POSITION
    )


def _low_engagement_high_traffic(r: PageRecord) -> bool:
    e = r.engagement
    return e.sessions > HIGH_TRAFFIC_SESSIONS and e.average_session_duration < LOW_ENGAGEMENT_SECONDS


def _high_traffic(r: PageRecord) -> bool:
    return r.engagement.sessions > TRAFFIC_SESSIONS


def _declining(r: PageRecord) -> bool:
    return r.trend_change < DECLINE_PERCENT


def _stagnant(r: PageRecord) -> bool:
    return abs(r.trend_change) < STAGNANT_PERCENT and r.trend_current > STAGNANT_MIN_VOLUME


PRIORITY_RULES: List[PriorityRule] = [
    PriorityRule(
        "low_ctr_high_impressions", "gsc", _low_ctr_high_impressions,
        "High impressions, low CTR → optimize meta description",
    ),
    PriorityRule(
        "poor_position_high_impressions", "gsc", _poor_position_high_impressions,
        "High impressions, poor position → improve SEO",
    ),
    PriorityRule(
        "low_ctr_top_position", "gsc", _low_ctr_top_position,
        "Good position, low CTR → improve content relevance",
    ),
    PriorityRule(
        "low_engagement_high_traffic", "ga4", _low_engagement_high_traffic,
        "High traffic, low engagement → improve content quality",
    ),
    PriorityRule(
        "high_traffic", "ga4", _high_traffic,
        "High traffic page → monitor bounce rate",
    ),
    PriorityRule(
        "declining", "trend", _declining,
        lambda r: f"Declining performance: {r.trend_change:.1f}% decrease",
    ),
    PriorityRule(
        "stagnant", "trend", _stagnant,
        "Stagnant performance → needs optimization",
    ),
]


# ============================================================================
# SCORING
# ============================================================================

def merge_page_records(
    search_rows: Iterable[PageSearchStats],
    engagement_rows: Iterable[PageEngagementStats],
    current_trend: Optional[Iterable[TrendWindow]] = None,
    previous_trend: Optional[Iterable[TrendWindow]] = None,
) -> List[PageRecord]:
    """
    Join the sources on normalized page path.

    Every page seen in either GSC or GA4 gets a record, in first-seen order
    (GSC pages first). Duplicate keys within a source keep the last row.
    """
    search_by_key: Dict[str, PageSearchStats] = {}
    for row in search_rows:
        search_by_key[normalize_page_path(row.page)] = row

    engagement_by_key: Dict[str, PageEngagementStats] = {}
    for row in engagement_rows:
        engagement_by_key[normalize_page_path(row.page_path)] = row

    current_by_key = index_by_key(current_trend)
    previous_by_key = index_by_key(previous_trend)

    keys = dict.fromkeys([*search_by_key.keys(), *engagement_by_key.keys()])
    return [
        PageRecord(
            page_path=key,
            search=search_by_key.get(key),
            engagement=engagement_by_key.get(key),
            current_trend=current_by_key.get(key),
            previous_trend=previous_by_key.get(key),
        )
        for key in keys
    ]


def score_page(record: PageRecord, rules: Optional[List[PriorityRule]] = None) -> PriorityScore:
    """Apply every rule to one merged page record."""
    priority = 0
    reasons = []

    for rule in rules or PRIORITY_RULES:
        if rule.applies(record):
            priority += rule.weight
            reasons.append(rule.describe(record))

    current = record.trend_current
    previous = record.trend_previous
    return PriorityScore(
        page_path=record.page_path,
        priority=priority,
        reasons=reasons,
        metrics=PriorityMetrics(current=current, previous=previous, delta=current - previous),
    )


def compute_update_priority(
    search_rows: Iterable[PageSearchStats],
    engagement_rows: Iterable[PageEngagementStats],
    current_trend: Optional[Iterable[TrendWindow]] = None,
    previous_trend: Optional[Iterable[TrendWindow]] = None,
) -> List[PriorityScore]:
    """
    Score every page and rank those needing attention.

    Args:
        search_rows: GSC top pages (page is an absolute URL or a path)
        engagement_rows: GA4 page aggregates
        current_trend: Optional trend windows; `current` is the current sum
        previous_trend: Optional trend windows; `previous` is the baseline sum

    Returns:
        Pages with priority > 0, highest priority first. Ties keep the
        first-seen page order. The full list is returned; truncation is the
        caller's concern.
    """
    records = merge_page_records(search_rows, engagement_rows, current_trend, previous_trend)

    scored = [score_page(record) for record in records]
    flagged = [score for score in scored if score.priority > 0]

    logger.debug(f"Scored {len(records)} pages, {len(flagged)} need attention")
    return sorted(flagged, key=lambda s: s.priority, reverse=True)

"""
Scoring Module for the Update-Priority Scoreboard

1. **Update Priority** (uncapped, sum of rule weights)
   Joins GSC and GA4 rows on the normalized page path and applies a fixed,
   ordered rule table (CTR, position, engagement, traffic, trend).

2. **Rolling Trends**
   Current vs previous N-day window sums, per series or per page.

Example Usage:
    from src.scoring import compute_update_priority

    scores = compute_update_priority(gsc_rows, ga4_rows)
    for score in scores[:10]:
        print(score.page_path, score.priority, score.reasons)
"""

from .helpers import (
    RULE_WEIGHTS,
    percent_change,
    engagement_score,
    format_number,
)

from .trends import (
    rolling_sums,
    build_page_trends,
    build_period_trends,
    index_by_key,
)

from .priority import (
    PageRecord,
    PriorityRule,
    PRIORITY_RULES,
    merge_page_records,
    score_page,
    compute_update_priority,
)

__all__ = [
    # Helpers
    "RULE_WEIGHTS",
    "percent_change",
    "engagement_score",
    "format_number",

    # Trends
    "rolling_sums",
    "build_page_trends",
    "build_period_trends",
    "index_by_key",

    # Priority
    "PageRecord",
    "PriorityRule",
    "PRIORITY_RULES",
    "merge_page_records",
    "score_page",
    "compute_update_priority",
]

__version__ = "1.0.0"

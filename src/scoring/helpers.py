"""
Scoring Helper Functions and Constants

Thresholds, weights and small numeric utilities shared by the priority
rules and the trend aggregation.
"""

from typing import Union

Number = Union[int, float]


# ============================================================================
# RULE THRESHOLDS
# ============================================================================

# Search Console side
HIGH_IMPRESSIONS = 1000
MODERATE_IMPRESSIONS = 500
LOW_CTR = 0.02
LOW_CTR_TOP_POSITION = 0.03
TOP_POSITION = 5
FIRST_PAGE_POSITION = 10

# GA4 side
HIGH_TRAFFIC_SESSIONS = 100
TRAFFIC_SESSIONS = 50
LOW_ENGAGEMENT_SECONDS = 30

# Trend side (percent)
DECLINE_PERCENT = -20
STAGNANT_PERCENT = 5
STAGNANT_MIN_VOLUME = 100


# ============================================================================
# RULE WEIGHTS
# ============================================================================

RULE_WEIGHTS = {
    "low_ctr_high_impressions": 30,
    "poor_position_high_impressions": 25,
    "low_ctr_top_position": 20,
    "low_engagement_high_traffic": 25,
    "high_traffic": 15,
    "declining": 35,
    "stagnant": 10,
}


# ============================================================================
# UTILITIES
# ============================================================================

def percent_change(current: Number, previous: Number) -> float:
    """
    Percentage change from previous to current.

    A zero baseline reports 100 when anything appeared and 0 otherwise,
    instead of dividing by zero.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def engagement_score(
    sessions: Number,
    engaged_sessions: Number,
    average_session_duration: Number,
) -> float:
    """
    Engagement score (0-100) from GA4 metrics.

    70% engagement rate, 30% session duration (capped at one minute).
    """
    if sessions <= 0:
        return 0.0

    engagement_rate = engaged_sessions / sessions
    duration_score = min(average_session_duration / 60, 1.0)

    return (engagement_rate * 0.7 + duration_score * 0.3) * 100


def format_number(num: Number) -> str:
    """Format a number with a K/M suffix (1500 -> '1.5K')."""
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1000:
        return f"{num / 1000:.1f}K"
    return str(num)

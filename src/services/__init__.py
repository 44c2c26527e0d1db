"""
Scoreboard Services Layer

Business logic that orchestrates provider calls, caching and scoring.
"""

from .scoreboard import ScoreboardService

__all__ = ["ScoreboardService"]

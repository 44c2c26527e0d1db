"""
Update-Priority Scoreboard

Ranks site pages that need a content update:
1. Collects page data from Google Search Console and GA4
2. Joins both sources on the normalized page path
3. Scores each page against a fixed, additive rule table
4. Serves the ranked list (and the raw provider data) over a cached API
"""

__version__ = "1.0.0"

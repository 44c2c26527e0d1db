"""
Scoreboard Caching Layer

- TTLCache: process-wide in-memory store for provider responses and
  computed scoreboards (lazy expiry, no eviction)
- Cache headers: Cache-Control/ETag helpers for the HTTP responses

Usage:
    cache = TTLCache()
    scores = cache.get(key)
    if scores is None:
        scores = await compute()
        cache.set(key, scores, ttl_seconds=900)
"""

from src.cache.memory_cache import CacheEntry, TTLCache
from src.cache.headers import (
    generate_etag,
    parse_etag,
    etags_match,
    build_cache_headers,
    add_cache_headers,
)

__all__ = [
    "CacheEntry",
    "TTLCache",
    "generate_etag",
    "parse_etag",
    "etags_match",
    "build_cache_headers",
    "add_cache_headers",
]

"""
In-Memory TTL Cache

Memoizes provider responses and computed scoreboards for the lifetime of
the process. Entries expire lazily: an expired entry is dropped the next
time it is read. There is no size bound or LRU eviction; the number of
distinct keys (one per endpoint and date range) stays small.

Single event loop access is assumed, so there is no locking. Two requests
racing on the same key both compute and the last write wins.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """Cached value and its expiry (epoch milliseconds)."""
    data: T
    expires_at: float

    def is_expired(self, now_ms: float) -> bool:
        return self.expires_at < now_ms


class TTLCache:
    """
    Expiring key-value store.

    Usage:
        cache = TTLCache()
        cache.set("scoreboard:2024-01-01:2024-01-28", scores, ttl_seconds=900)
        scores = cache.get("scoreboard:2024-01-01:2024-01-28")

    Values are returned as stored, without copying; callers must treat them
    as read-only.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """
        Args:
            clock: Returns the current time in seconds (defaults to time.time)
        """
        self._entries: Dict[str, CacheEntry[Any]] = {}
        self._clock = clock or time.time
        self._hits = 0
        self._misses = 0

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            logger.debug(f"Cache MISS for {key}")
            return None

        if entry.is_expired(self._now_ms()):
            del self._entries[key]
            self._misses += 1
            logger.debug(f"Cache EXPIRED for {key}")
            return None

        self._hits += 1
        logger.debug(f"Cache HIT for {key}")
        return entry.data

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store a value that expires after ttl_seconds."""
        self._entries[key] = CacheEntry(
            data=value,
            expires_at=self._now_ms() + ttl_seconds * 1000,
        )
        logger.debug(f"Cached {key} for {ttl_seconds}s")

    async def get_or_compute(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl_seconds: float,
    ) -> Any:
        """
        Return the cached value or await factory() and cache its result.

        Failures propagate and leave the cache untouched.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = await factory()
        self.set(key, value, ttl_seconds)
        return value

    def clear(self) -> int:
        """Remove all entries. Returns how many were removed."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def stats(self) -> Dict[str, int]:
        """Entry counts; valid means get() would still return the entry."""
        now = self._now_ms()
        valid = sum(1 for entry in self._entries.values() if not entry.is_expired(now))
        total = len(self._entries)
        return {
            "totalEntries": total,
            "validEntries": valid,
            "expiredEntries": total - valid,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Hit/miss counters alongside the entry counts."""
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests else 0
        return {
            **self.stats(),
            "hits": self._hits,
            "misses": self._misses,
            "hitRatePercent": round(hit_rate, 1),
        }

    def __len__(self) -> int:
        return len(self._entries)

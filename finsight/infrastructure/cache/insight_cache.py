"""
In-memory insight cache.

Entries are keyed by (user, period_start, period_end) and remember when
they were stored. An entry is valid while ``now - created_at <= ttl``;
expiry is checked only for the key being read, and nothing is swept in
the background. Single-process only; nothing is shared across workers.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from cachetools import LRUCache

from finsight.config import get_logger, get_settings
from finsight.core.entities.insight import StoredInsight
from finsight.core.interfaces.cache import IInsightCache

logger = get_logger(__name__)

# Capacity guard; least recently used entries go first once it is reached
DEFAULT_MAX_ENTRIES = 10000

CacheKey = tuple[str, date, date]


@dataclass(frozen=True)
class CacheEntry:
    payload: StoredInsight
    created_at: float


def make_cache_key(user_id: str, period_start: date, period_end: date) -> str:
    """Printable key, user:start:end."""
    return f"{user_id}:{period_start.isoformat()}:{period_end.isoformat()}"


class InsightCache(IInsightCache):
    """Thread-safe TTL cache for generated insights."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: LRUCache = LRUCache(maxsize=max_entries)
        self._lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0, "expired": 0}

    def get(self, user_id: str, period_start: date, period_end: date) -> StoredInsight | None:
        key: CacheKey = (user_id, period_start, period_end)
        with self._lock:
            entry: CacheEntry | None = self._entries.get(key)
            if entry is not None and self._clock() - entry.created_at > self.ttl_seconds:
                del self._entries[key]
                self._stats["expired"] += 1
                entry = None

            if entry is None:
                self._stats["misses"] += 1
                return None
            self._stats["hits"] += 1

        logger.debug("insight_cache_hit", key=make_cache_key(*key))
        return entry.payload

    def put(
        self, user_id: str, period_start: date, period_end: date, value: StoredInsight
    ) -> None:
        with self._lock:
            self._entries[(user_id, period_start, period_end)] = CacheEntry(
                payload=value, created_at=self._clock()
            )

    def clear_user(self, user_id: str) -> int:
        with self._lock:
            keys = [key for key in self._entries.keys() if key[0] == user_id]
            for key in keys:
                del self._entries[key]

        if keys:
            logger.info("insight_cache_user_cleared", user_id=user_id, removed=len(keys))
        return len(keys)

    def clear_all(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("insight_cache_cleared", removed=count)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            hits, misses = self._stats["hits"], self._stats["misses"]
            total = hits + misses
            return {
                "size": len(self._entries),
                "max_size": self._entries.maxsize,
                "ttl_seconds": self.ttl_seconds,
                "hits": hits,
                "misses": misses,
                "expired": self._stats["expired"],
                "hit_rate": round(hits / total * 100, 1) if total else 0.0,
            }


# Singleton
_insight_cache: InsightCache | None = None


def get_insight_cache() -> InsightCache:
    """Get or create the process-wide insight cache."""
    global _insight_cache
    if _insight_cache is None:
        settings = get_settings()
        _insight_cache = InsightCache(ttl_seconds=settings.insights.cache_ttl_seconds)
    return _insight_cache


def reset_insight_cache() -> None:
    """Reset the cache singleton (for testing)."""
    global _insight_cache
    _insight_cache = None

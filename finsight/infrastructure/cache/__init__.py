"""Process-local caches."""

from finsight.infrastructure.cache.insight_cache import (
    InsightCache,
    get_insight_cache,
    make_cache_key,
    reset_insight_cache,
)

__all__ = [
    "InsightCache",
    "get_insight_cache",
    "make_cache_key",
    "reset_insight_cache",
]

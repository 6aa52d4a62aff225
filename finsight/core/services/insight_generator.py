"""
Insight Generator.

Sequences cache lookup, stored-record lookup, aggregation, prompting,
model invocation and validation, then persists and prunes. Failures
in the generation stages fall back to the latest stored insight, and
failing that to a persisted placeholder.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from finsight.config import get_logger
from finsight.core.entities.finance import Currency
from finsight.core.entities.insight import (
    DEFAULT_PROJECTION,
    InsightPeriod,
    ParsedInsight,
    StoredInsight,
)
from finsight.core.exceptions import FallbackExhaustedError
from finsight.core.interfaces.cache import IInsightCache
from finsight.core.interfaces.llm import IModelGateway
from finsight.core.interfaces.storage import IInsightStore, ISettingsStore
from finsight.core.services.analytics_aggregator import AnalyticsAggregator
from finsight.core.services.prompt_builder import build_prompt
from finsight.core.services.response_parser import parse_insight_reply

logger = get_logger(__name__)

DEFAULT_RETENTION = 10
DEFAULT_MODEL_RETRIES = 2

PLACEHOLDER_SUMMARY = "Unable to generate AI insights at this time. Please try again later."
PLACEHOLDER_RECOMMENDATIONS = [
    "Track your spending regularly",
    "Set up budgets for major expense categories",
    "Review your transactions weekly",
]

PeriodKey = tuple[str, str, str]


def placeholder_payload(period: InsightPeriod) -> dict[str, Any]:
    """Static low-confidence insight used when nothing else is available."""
    return {
        "period_start": period.start,
        "period_end": period.end,
        "monthly_summary": PLACEHOLDER_SUMMARY,
        "category_insights": [],
        "spending_spikes": [],
        "recommendations": list(PLACEHOLDER_RECOMMENDATIONS),
        "projections": DEFAULT_PROJECTION.model_dump(),
    }


class InsightGenerator:
    """
    Orchestrates insight generation for one user and period.

    Concurrent calls for the same user and period in this process are
    serialized; the later caller is served from the cache the first
    one filled.
    """

    def __init__(
        self,
        insight_store: IInsightStore,
        settings_store: ISettingsStore,
        aggregator: AnalyticsAggregator,
        gateway: IModelGateway,
        cache: IInsightCache,
        retention_count: int = DEFAULT_RETENTION,
        max_retries: int = DEFAULT_MODEL_RETRIES,
    ) -> None:
        self._insights = insight_store
        self._settings = settings_store
        self._aggregator = aggregator
        self._gateway = gateway
        self._cache = cache
        self._retention = retention_count
        self._max_retries = max_retries

        self._locks: dict[PeriodKey, asyncio.Lock] = {}
        self._waiters: dict[PeriodKey, int] = {}

    async def generate(self, user_id: str, period: InsightPeriod) -> StoredInsight:
        """
        Return insights for the period, generating them if needed.

        Lookup order is cache, then stored record, then the model.

        Raises:
            PersistenceError: Stored-record lookup or save failed
            FallbackExhaustedError: Generation failed and no placeholder could be saved
        """
        cached = self._cache.get(user_id, period.start, period.end)
        if cached is not None:
            return cached

        async with self._single_flight(user_id, period):
            cached = self._cache.get(user_id, period.start, period.end)
            if cached is not None:
                return cached

            existing = await self._insights.find_by_period(user_id, period.start, period.end)
            if existing is not None:
                logger.info("insight_store_hit", user_id=user_id, insight_id=existing.id)
                self._cache.put(user_id, period.start, period.end, existing)
                return existing

            try:
                parsed = await self._generate_fresh(user_id, period)
            except Exception as e:
                return await self._fallback(user_id, period, e)

            record = await self._insights.create(user_id, self._to_payload(parsed, period))
            await self._prune(user_id)
            self._cache.put(user_id, period.start, period.end, record)

            logger.info(
                "insight_generated",
                user_id=user_id,
                insight_id=record.id,
                categories=len(record.category_insights),
                has_projections=parsed.projections is not None,
            )
            return record

    async def get_latest(self, user_id: str) -> StoredInsight | None:
        """Newest stored insight for the user, or None if none or on store failure."""
        try:
            return await self._insights.find_latest(user_id)
        except Exception:
            logger.warning("insight_latest_lookup_failed", user_id=user_id, exc_info=True)
            return None

    def clear_cache(self, user_id: str | None = None) -> None:
        if user_id is None:
            self._cache.clear_all()
        else:
            self._cache.clear_user(user_id)

    async def _generate_fresh(self, user_id: str, period: InsightPeriod) -> ParsedInsight:
        user_settings = await self._settings.get_user_settings(user_id)
        currency: Currency = user_settings.currency

        snapshot = await self._aggregator.aggregate(user_id, period)
        prompt = build_prompt(snapshot, period, currency)

        reply = await self._gateway.retry(
            lambda: self._gateway.invoke(prompt, currency.value),
            self._max_retries,
        )
        return parse_insight_reply(reply)

    async def _fallback(
        self, user_id: str, period: InsightPeriod, error: Exception
    ) -> StoredInsight:
        classification = self._gateway.classify(error)
        context = {
            "user_id": user_id,
            "period_start": period.start.isoformat(),
            "period_end": period.end.isoformat(),
            "kind": classification.kind,
            "error": str(error),
        }
        if classification.retryable:
            logger.warning("insight_generation_degraded", **context)
        else:
            logger.error("insight_generation_failed", error_type=type(error).__name__, **context)

        latest = await self.get_latest(user_id)
        if latest is not None:
            logger.info(
                "insight_fallback_latest",
                user_id=user_id,
                insight_id=latest.id,
                kind=classification.kind,
            )
            return latest

        try:
            placeholder = await self._insights.create(user_id, placeholder_payload(period))
        except Exception as e:
            logger.error("insight_placeholder_failed", user_id=user_id, error=str(e))
            raise FallbackExhaustedError(str(e)) from e

        logger.warning("insight_fallback_placeholder", user_id=user_id, insight_id=placeholder.id)
        await self._prune(user_id)
        return placeholder

    async def _prune(self, user_id: str) -> None:
        """Delete the oldest records beyond the retention count."""
        try:
            records = await self._insights.list_for_user(user_id)
            stale = records[self._retention:]
            for record in stale:
                await self._insights.delete(record.id, user_id)
        except Exception:
            logger.warning("insight_prune_failed", user_id=user_id, exc_info=True)
            return

        if stale:
            logger.info("insights_pruned", user_id=user_id, removed=len(stale))

    @staticmethod
    def _to_payload(parsed: ParsedInsight, period: InsightPeriod) -> dict[str, Any]:
        payload = parsed.model_dump()
        payload["period_start"] = period.start
        payload["period_end"] = period.end
        if payload["projections"] is None:
            payload["projections"] = DEFAULT_PROJECTION.model_dump()
        return payload

    @asynccontextmanager
    async def _single_flight(self, user_id: str, period: InsightPeriod) -> AsyncIterator[None]:
        key: PeriodKey = (user_id, period.start.isoformat(), period.end.isoformat())
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

"""Tests for the insight generation pipeline and its fallback ladder."""

import asyncio
import json
from datetime import date
from unittest.mock import AsyncMock

import pytest

from finsight.core.entities import (
    DEFAULT_PROJECTION,
    Currency,
    InsightPeriod,
    ProjectionConfidence,
    UserSettings,
)
from finsight.core.exceptions import (
    FallbackExhaustedError,
    ModelAPIError,
    ModelAuthError,
    ModelRateLimitError,
    ModelTimeoutError,
    PersistenceError,
)
from finsight.core.services.insight_generator import (
    PLACEHOLDER_RECOMMENDATIONS,
    PLACEHOLDER_SUMMARY,
)

from service_fakes import ScriptedGateway


def _period(month: int) -> InsightPeriod:
    return InsightPeriod(start=date(2024, month, 1), end=date(2024, month, 28))


class TestGenerateFresh:
    """Tests for generating a fresh insight."""

    async def test_generates_persists_and_caches(self, build_generator, insight_store, cache, period, valid_reply):
        """Test generates persists and caches."""
        gateway = ScriptedGateway(valid_reply)
        generator = build_generator(gateway)

        record = await generator.generate("user-1", period)

        assert gateway.calls == 1
        assert record.user_id == "user-1"
        assert record.period == period
        assert record.category_insights[0].category == "Food"
        assert insight_store.records == [record]
        assert cache.get("user-1", period.start, period.end) == record

    async def test_prompt_uses_user_currency(self, build_generator, settings_store, period, valid_reply):
        """Test prompt uses user currency."""
        settings_store.get_user_settings.return_value = UserSettings(
            user_id="user-1", currency=Currency.INR
        )
        gateway = ScriptedGateway(valid_reply)

        await build_generator(gateway).generate("user-1", period)

        assert "User Currency: INR" in gateway.prompts[0]

    async def test_missing_projections_stored_as_default(self, build_generator, period):
        """Test missing projections stored as default."""
        reply = json.dumps({"monthlySummary": "Fine.", "categoryInsights": []})
        record = await build_generator(ScriptedGateway(reply)).generate("user-1", period)
        assert record.projections == DEFAULT_PROJECTION

    async def test_retryable_failures_then_success(self, build_generator, period, valid_reply):
        """Test retryable failures then success."""
        gateway = ScriptedGateway(
            ModelRateLimitError("openai"),
            ModelRateLimitError("openai"),
            valid_reply,
        )

        record = await build_generator(gateway).generate("user-1", period)

        assert gateway.calls == 3
        assert record.monthly_summary.startswith("You spent")


class TestLookupOrder:
    """Tests for cache then store lookup order."""

    async def test_cache_hit_skips_store_and_model(self, build_generator, insight_store, period, valid_reply):
        """Test cache hit skips store and model."""
        gateway = ScriptedGateway(valid_reply)
        generator = build_generator(gateway)

        first = await generator.generate("user-1", period)
        second = await generator.generate("user-1", period)

        assert second.id == first.id
        assert gateway.calls == 1
        assert insight_store.calls["find_by_period"] == 1

    async def test_store_hit_skips_model_and_fills_cache(
        self, build_generator, insight_store, cache, period, make_insight
    ):
        """Test store hit skips model and fills cache."""
        existing = make_insight(start=period.start, end=period.end)
        insight_store.records.append(existing)
        gateway = ScriptedGateway(ModelAPIError("openai", "should not be called"))

        record = await build_generator(gateway).generate("user-1", period)

        assert record.id == existing.id
        assert gateway.calls == 0
        assert cache.get("user-1", period.start, period.end) == existing

    async def test_store_lookup_failure_propagates(self, build_generator, insight_store, period, valid_reply):
        """Test store lookup failure propagates."""
        insight_store.find_by_period = AsyncMock(side_effect=PersistenceError("find", "locked"))
        gateway = ScriptedGateway(valid_reply)

        with pytest.raises(PersistenceError):
            await build_generator(gateway).generate("user-1", period)
        assert gateway.calls == 0

    async def test_persist_failure_propagates(self, build_generator, insight_store, period, valid_reply):
        """Test persist failure propagates."""
        insight_store.create = AsyncMock(side_effect=PersistenceError("create_insight", "full"))

        with pytest.raises(PersistenceError):
            await build_generator(ScriptedGateway(valid_reply)).generate("user-1", period)


class TestFallbackLadder:
    """Tests for the generation fallback ladder."""

    async def test_auth_failure_returns_latest(self, build_generator, insight_store, make_insight, period):
        """Test auth failure returns latest."""
        older = make_insight(start=date(2023, 12, 1), end=date(2023, 12, 31))
        insight_store.records.append(older)
        gateway = ScriptedGateway(ModelAuthError("openai", "bad key", 401))

        record = await build_generator(gateway).generate("user-1", period)

        assert record.id == older.id
        assert gateway.calls == 1
        assert insight_store.calls["create"] == 0

    async def test_latest_fallback_is_not_cached_for_period(
        self, build_generator, insight_store, cache, make_insight, period
    ):
        """Test latest fallback is not cached for period."""
        insight_store.records.append(make_insight(start=date(2023, 12, 1), end=date(2023, 12, 31)))

        await build_generator(ScriptedGateway(ModelAuthError("openai"))).generate("user-1", period)

        assert cache.get("user-1", period.start, period.end) is None

    async def test_unreachable_with_nothing_stored_persists_placeholder(
        self, build_generator, insight_store, period
    ):
        """Test unreachable with nothing stored persists placeholder."""
        gateway = ScriptedGateway(ModelTimeoutError("openai", 30))
        generator = build_generator(gateway)

        placeholder = await generator.generate("user-1", period)

        assert gateway.calls == 3
        assert placeholder.monthly_summary == PLACEHOLDER_SUMMARY
        assert placeholder.recommendations == PLACEHOLDER_RECOMMENDATIONS
        assert placeholder.category_insights == []
        assert placeholder.projections.confidence == ProjectionConfidence.LOW
        assert insight_store.records == [placeholder]

        again = await generator.generate("user-1", period)

        assert again.id == placeholder.id
        assert gateway.calls == 3

    async def test_unparseable_reply_falls_back(self, build_generator, period):
        """Test unparseable reply falls back."""
        gateway = ScriptedGateway("I cannot produce JSON today.")

        record = await build_generator(gateway).generate("user-1", period)

        assert gateway.calls == 1
        assert record.monthly_summary == PLACEHOLDER_SUMMARY

    async def test_unexpected_error_falls_back_without_retry(
        self, build_generator, aggregator, period, valid_reply
    ):
        """Test unexpected error falls back without retry."""
        aggregator.aggregate.side_effect = RuntimeError("boom")
        gateway = ScriptedGateway(valid_reply)

        record = await build_generator(gateway).generate("user-1", period)

        assert gateway.calls == 0
        assert record.monthly_summary == PLACEHOLDER_SUMMARY

    async def test_latest_lookup_failure_still_reaches_placeholder(
        self, build_generator, insight_store, period
    ):
        """Test latest lookup failure still reaches placeholder."""
        insight_store.find_latest = AsyncMock(side_effect=PersistenceError("latest", "locked"))

        record = await build_generator(ScriptedGateway(ModelAuthError("openai"))).generate(
            "user-1", period
        )

        assert record.monthly_summary == PLACEHOLDER_SUMMARY

    async def test_placeholder_failure_raises_fallback_exhausted(
        self, build_generator, insight_store, period
    ):
        """Test placeholder failure raises fallback exhausted."""
        insight_store.create = AsyncMock(side_effect=PersistenceError("create_insight", "locked"))

        with pytest.raises(FallbackExhaustedError) as exc_info:
            await build_generator(ScriptedGateway(ModelAuthError("openai"))).generate(
                "user-1", period
            )
        assert exc_info.value.message == "Insight generation failed"


class TestRetention:
    """Tests for stored insight retention."""

    async def test_oldest_records_pruned(self, build_generator, insight_store, valid_reply):
        """Test oldest records pruned."""
        generator = build_generator(ScriptedGateway(valid_reply), retention_count=2)

        first = await generator.generate("user-1", _period(1))
        await generator.generate("user-1", _period(2))
        await generator.generate("user-1", _period(3))

        remaining = await insight_store.list_for_user("user-1")
        assert len(remaining) == 2
        assert first.id not in {r.id for r in remaining}

    async def test_other_users_untouched(self, build_generator, insight_store, make_insight, valid_reply):
        """Test other users untouched."""
        other = make_insight(user_id="user-2")
        insight_store.records.append(other)
        generator = build_generator(ScriptedGateway(valid_reply), retention_count=1)

        await generator.generate("user-1", _period(1))
        await generator.generate("user-1", _period(2))

        assert await insight_store.list_for_user("user-2") == [other]

    async def test_prune_failure_does_not_fail_request(self, build_generator, insight_store, period, valid_reply):
        """Test prune failure does not fail request."""
        insight_store.list_for_user = AsyncMock(side_effect=PersistenceError("list", "locked"))

        record = await build_generator(ScriptedGateway(valid_reply)).generate("user-1", period)

        assert record in insight_store.records


class TestConcurrency:
    """Tests for per-key generation locking."""

    async def test_same_key_requests_invoke_model_once(self, build_generator, period, valid_reply):
        """Test same key requests invoke model once."""
        gateway = ScriptedGateway(valid_reply, delay=0.05)
        generator = build_generator(gateway)

        first, second = await asyncio.gather(
            generator.generate("user-1", period),
            generator.generate("user-1", period),
        )

        assert gateway.calls == 1
        assert first.id == second.id
        assert generator._locks == {}

    async def test_different_users_not_serialized(self, build_generator, period, valid_reply):
        """Test different users not serialized."""
        gateway = ScriptedGateway(valid_reply, delay=0.01)
        generator = build_generator(gateway)

        a, b = await asyncio.gather(
            generator.generate("user-1", period),
            generator.generate("user-2", period),
        )

        assert gateway.calls == 2
        assert a.user_id == "user-1"
        assert b.user_id == "user-2"


class TestLatestAndCache:
    """Tests for latest lookup and cache clearing."""

    async def test_get_latest(self, build_generator, insight_store, make_insight, later):
        """Test getting the latest stored insight."""
        insight_store.records.append(make_insight(generated_at=later(0)))
        newest = make_insight(generated_at=later(5))
        insight_store.records.append(newest)

        generator = build_generator(ScriptedGateway("{}"))

        assert (await generator.get_latest("user-1")).id == newest.id
        assert await generator.get_latest("nobody") is None

    async def test_get_latest_swallows_store_errors(self, build_generator, insight_store):
        """Test get latest swallows store errors."""
        insight_store.find_latest = AsyncMock(side_effect=PersistenceError("latest", "locked"))
        assert await build_generator(ScriptedGateway("{}")).get_latest("user-1") is None

    async def test_clear_cache(self, build_generator, cache, period, valid_reply):
        """Test clearing cached insights for one user."""
        generator = build_generator(ScriptedGateway(valid_reply))
        await generator.generate("user-1", period)

        generator.clear_cache("user-1")

        assert cache.get("user-1", period.start, period.end) is None

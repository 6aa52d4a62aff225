"""Fixtures for service-level tests."""

from unittest.mock import AsyncMock

import pytest

from finsight.core.entities import AnalyticsSnapshot, UserSettings
from finsight.core.interfaces import IModelGateway
from finsight.core.services import AnalyticsAggregator, InsightGenerator
from finsight.infrastructure.cache import InsightCache

from service_fakes import InMemoryInsightStore


@pytest.fixture
def insight_store() -> InMemoryInsightStore:
    return InMemoryInsightStore()


@pytest.fixture
def settings_store() -> AsyncMock:
    store = AsyncMock()
    store.get_user_settings.return_value = UserSettings(user_id="user-1")
    return store


@pytest.fixture
def aggregator(sample_transactions) -> AsyncMock:
    mock = AsyncMock(spec=AnalyticsAggregator)
    mock.aggregate.return_value = AnalyticsSnapshot(
        total_spending=sum(t.amount for t in sample_transactions),
        transaction_count=len(sample_transactions),
    )
    return mock


@pytest.fixture
def cache() -> InsightCache:
    return InsightCache(ttl_seconds=3600)


@pytest.fixture
def build_generator(insight_store, settings_store, aggregator, cache):
    """Build an InsightGenerator around a scripted gateway."""

    def _build(gateway: IModelGateway, retention_count: int = 10) -> InsightGenerator:
        return InsightGenerator(
            insight_store=insight_store,
            settings_store=settings_store,
            aggregator=aggregator,
            gateway=gateway,
            cache=cache,
            retention_count=retention_count,
            max_retries=2,
        )

    return _build

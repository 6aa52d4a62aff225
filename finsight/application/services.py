"""
Service factory functions for dependency injection.

Wires the SQLite stores, the configured model gateway and the
process-wide insight cache into the core services. Use cases and API
handlers obtain their collaborators from here.
"""

from typing import TYPE_CHECKING

from finsight.application.use_cases import (
    ExportInsightUseCase,
    GenerateInsightsUseCase,
    GetLatestInsightsUseCase,
)
from finsight.config import get_settings
from finsight.core.entities.finance import Currency
from finsight.core.services import AnalyticsAggregator, InsightGenerator

if TYPE_CHECKING:
    from finsight.core.interfaces import (
        IBudgetStore,
        IInsightCache,
        IInsightStore,
        IModelGateway,
        ISettingsStore,
        ITransactionStore,
    )


# Singleton service instances
_insight_generator: InsightGenerator | None = None


def get_insight_generator(
    insight_store: "IInsightStore | None" = None,
    settings_store: "ISettingsStore | None" = None,
    transaction_store: "ITransactionStore | None" = None,
    budget_store: "IBudgetStore | None" = None,
    gateway: "IModelGateway | None" = None,
    cache: "IInsightCache | None" = None,
) -> InsightGenerator:
    """
    Get or create the InsightGenerator.

    Any collaborator not supplied is built from settings. Passing an
    override always builds a fresh, non-singleton instance.
    """
    global _insight_generator

    overrides = (insight_store, settings_store, transaction_store, budget_store, gateway, cache)
    if _insight_generator is not None and all(o is None for o in overrides):
        return _insight_generator

    # Lazy import infrastructure to avoid circular imports
    from finsight.infrastructure.cache import get_insight_cache
    from finsight.infrastructure.llm import get_model_gateway
    from finsight.infrastructure.storage.sqlite import (
        SQLiteBudgetStore,
        SQLiteInsightStore,
        SQLiteSettingsStore,
        SQLiteTransactionStore,
    )

    settings = get_settings()

    generator = InsightGenerator(
        insight_store=insight_store or SQLiteInsightStore(),
        settings_store=settings_store
        or SQLiteSettingsStore(default_currency=Currency(settings.insights.default_currency)),
        aggregator=AnalyticsAggregator(
            transaction_store=transaction_store or SQLiteTransactionStore(),
            budget_store=budget_store or SQLiteBudgetStore(),
        ),
        gateway=gateway or get_model_gateway(),
        cache=cache or get_insight_cache(),
        retention_count=settings.insights.retention_count,
        max_retries=settings.llm.max_retries,
    )

    if all(o is None for o in overrides):
        _insight_generator = generator
    return generator


def get_generate_insights_use_case() -> GenerateInsightsUseCase:
    return GenerateInsightsUseCase(get_insight_generator())


def get_latest_insights_use_case() -> GetLatestInsightsUseCase:
    return GetLatestInsightsUseCase(get_insight_generator())


def get_export_insight_use_case() -> ExportInsightUseCase:
    from finsight.infrastructure.storage.sqlite import SQLiteInsightStore, SQLiteSettingsStore

    settings = get_settings()
    return ExportInsightUseCase(
        insight_store=SQLiteInsightStore(),
        settings_store=SQLiteSettingsStore(
            default_currency=Currency(settings.insights.default_currency)
        ),
    )


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _insight_generator
    _insight_generator = None


__all__ = [
    # Factory functions
    "get_insight_generator",
    "get_generate_insights_use_case",
    "get_latest_insights_use_case",
    "get_export_insight_use_case",
    # Reset
    "reset_services",
]

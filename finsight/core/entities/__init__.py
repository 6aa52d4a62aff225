"""Core domain entities."""

from finsight.core.entities.analytics import (
    AnalyticsSnapshot,
    BudgetHealth,
    BudgetStatus,
    CategoryBreakdown,
    MerchantTotal,
    TrendGrouping,
    TrendPoint,
)
from finsight.core.entities.finance import (
    Budget,
    BudgetPeriod,
    BudgetProgress,
    Currency,
    Transaction,
    TransactionFilters,
    UserSettings,
)
from finsight.core.entities.insight import (
    DEFAULT_PROJECTION,
    CategoryInsight,
    InsightPeriod,
    ParsedInsight,
    Projection,
    ProjectionConfidence,
    SpendingSpike,
    StoredInsight,
)

__all__ = [
    # Analytics
    "AnalyticsSnapshot",
    "BudgetHealth",
    "BudgetStatus",
    "CategoryBreakdown",
    "MerchantTotal",
    "TrendGrouping",
    "TrendPoint",
    # Finance
    "Budget",
    "BudgetPeriod",
    "BudgetProgress",
    "Currency",
    "Transaction",
    "TransactionFilters",
    "UserSettings",
    # Insight
    "DEFAULT_PROJECTION",
    "CategoryInsight",
    "InsightPeriod",
    "ParsedInsight",
    "Projection",
    "ProjectionConfidence",
    "SpendingSpike",
    "StoredInsight",
]

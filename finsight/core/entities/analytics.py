"""Aggregated analytics for one user and period."""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class TrendGrouping(str, Enum):
    """Bucket size for spending trends."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class BudgetHealth(str, Enum):
    """Budget utilisation band."""

    UNDER = "under"
    NEAR = "near"
    OVER = "over"


class CategoryBreakdown(BaseModel):
    category: str
    total: Decimal
    count: int
    percentage: float = 0.0


class MerchantTotal(BaseModel):
    merchant: str
    total: Decimal


class TrendPoint(BaseModel):
    date: date
    amount: Decimal
    transaction_count: int = 0


class BudgetStatus(BaseModel):
    budget_id: str | None = None
    name: str
    percentage_used: float
    spent: Decimal
    limit: Decimal
    status: BudgetHealth = BudgetHealth.UNDER


class AnalyticsSnapshot(BaseModel):
    """
    Aggregated spending for a period.

    Ephemeral: built per generation call and never persisted.
    """

    total_spending: Decimal = Decimal("0")
    transaction_count: int = 0
    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list)
    top_merchants: list[MerchantTotal] | None = None
    budget_status: list[BudgetStatus] | None = None
    trends: list[TrendPoint] | None = None

"""Insight entities produced by the generation pipeline."""

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ProjectionConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CategoryInsight(BaseModel):
    category: str
    total_spent: float
    percentage_of_total: float
    insight: str


class SpendingSpike(BaseModel):
    date: str
    amount: float
    category: str
    description: str


class Projection(BaseModel):
    next_week: float
    next_month: float
    confidence: ProjectionConfidence
    explanation: str


DEFAULT_PROJECTION = Projection(
    next_week=0,
    next_month=0,
    confidence=ProjectionConfidence.LOW,
    explanation="Insufficient data for projections",
)


class InsightPeriod(BaseModel):
    """Inclusive calendar-date range."""

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "InsightPeriod":
        if self.start > self.end:
            raise ValueError("period start must not be after period end")
        return self


class ParsedInsight(BaseModel):
    """
    Validated model reply.

    category_insights is always a list; projections is either complete
    or None.
    """

    monthly_summary: str
    category_insights: list[CategoryInsight] = Field(default_factory=list)
    spending_spikes: list[SpendingSpike] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    projections: Projection | None = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StoredInsight(ParsedInsight):
    """Persisted insight record for one user and period."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    period_start: date
    period_end: date
    generated_at: datetime = Field(default_factory=_utc_now)

    @model_validator(mode="after")
    def check_period(self) -> "StoredInsight":
        if self.period_start > self.period_end:
            raise ValueError("period_start must not be after period_end")
        return self

    @property
    def period(self) -> InsightPeriod:
        return InsightPeriod(start=self.period_start, end=self.period_end)

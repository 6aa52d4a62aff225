"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from finsight.core.entities.insight import StoredInsight


class CategoryInsightResponse(BaseModel):
    category: str
    total_spent: float
    percentage_of_total: float
    insight: str


class SpendingSpikeResponse(BaseModel):
    date: str
    amount: float
    category: str
    description: str


class ProjectionResponse(BaseModel):
    next_week: float
    next_month: float
    confidence: str
    explanation: str


class InsightResponse(BaseModel):
    """Stored insight as returned to clients."""

    id: str
    user_id: str
    period_start: date
    period_end: date
    monthly_summary: str
    category_insights: list[CategoryInsightResponse] = Field(default_factory=list)
    spending_spikes: list[SpendingSpikeResponse] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    projections: ProjectionResponse | None = None
    generated_at: datetime

    @classmethod
    def from_entity(cls, insight: StoredInsight) -> "InsightResponse":
        return cls.model_validate(insight.model_dump(mode="json"))


class ExportResponse(BaseModel):
    content: str
    filename: str
    format: str = "text"


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    model: str | None = None
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    llm: ProviderHealthResponse | None = None
    database: ProviderHealthResponse | None = None
    cache: dict | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSIGHT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)

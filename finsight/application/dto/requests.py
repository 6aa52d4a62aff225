"""Request DTOs for API endpoints.

Field formats are checked by the use cases so that every validation
failure surfaces as the same VALIDATION_ERROR response.
"""

from pydantic import BaseModel, ConfigDict, Field


class GenerateInsightsRequest(BaseModel):
    """Request to generate insights for a period."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: str | None = Field(
        default=None,
        alias="startDate",
        description="Inclusive period start, YYYY-MM-DD",
        examples=["2024-01-01"],
    )
    end_date: str | None = Field(
        default=None,
        alias="endDate",
        description="Inclusive period end, YYYY-MM-DD",
        examples=["2024-01-31"],
    )


class ExportInsightRequest(BaseModel):
    """Request to export a stored insight."""

    model_config = ConfigDict(populate_by_name=True)

    insight_id: str | None = Field(
        default=None,
        alias="insightId",
        description="ID of the insight to export",
    )
    format: str | None = Field(
        default=None,
        description='Export format, "text" or "pdf"',
        examples=["text"],
    )

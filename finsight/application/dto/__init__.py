"""Data Transfer Objects for the API layer."""

from finsight.application.dto.requests import ExportInsightRequest, GenerateInsightsRequest
from finsight.application.dto.responses import (
    CategoryInsightResponse,
    ErrorResponse,
    ExportResponse,
    HealthResponse,
    InsightResponse,
    ProjectionResponse,
    ProviderHealthResponse,
    SpendingSpikeResponse,
)

__all__ = [
    # Requests
    "ExportInsightRequest",
    "GenerateInsightsRequest",
    # Responses
    "CategoryInsightResponse",
    "ErrorResponse",
    "ExportResponse",
    "HealthResponse",
    "InsightResponse",
    "ProjectionResponse",
    "ProviderHealthResponse",
    "SpendingSpikeResponse",
]

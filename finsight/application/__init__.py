"""
Application layer - use cases, DTOs and service factories.

Use cases are the only entry point for API handlers and the CLI.
"""

from finsight.application.dto import (
    ErrorResponse,
    ExportInsightRequest,
    ExportResponse,
    GenerateInsightsRequest,
    HealthResponse,
    InsightResponse,
)
from finsight.application.services import (
    get_export_insight_use_case,
    get_generate_insights_use_case,
    get_insight_generator,
    get_latest_insights_use_case,
    reset_services,
)
from finsight.application.use_cases import (
    ExportInsightUseCase,
    GenerateInsightsUseCase,
    GetLatestInsightsUseCase,
)

__all__ = [
    # Request DTOs
    "GenerateInsightsRequest",
    "ExportInsightRequest",
    # Response DTOs
    "InsightResponse",
    "ExportResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "GenerateInsightsUseCase",
    "GetLatestInsightsUseCase",
    "ExportInsightUseCase",
    # Service factories
    "get_insight_generator",
    "get_generate_insights_use_case",
    "get_latest_insights_use_case",
    "get_export_insight_use_case",
    "reset_services",
]

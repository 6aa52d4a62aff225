"""Application use cases."""

from finsight.application.use_cases.export_insight import ExportInsightUseCase, ExportResult
from finsight.application.use_cases.generate_insights import (
    GenerateInsightsUseCase,
    parse_period,
)
from finsight.application.use_cases.get_latest_insights import GetLatestInsightsUseCase

__all__ = [
    "ExportInsightUseCase",
    "ExportResult",
    "GenerateInsightsUseCase",
    "GetLatestInsightsUseCase",
    "parse_period",
]

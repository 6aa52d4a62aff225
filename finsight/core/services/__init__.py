"""Core domain services."""

from finsight.core.services.analytics_aggregator import AnalyticsAggregator
from finsight.core.services.currency import format_amount, get_currency, get_currency_symbol
from finsight.core.services.insight_exporter import ExportFormat, render_report, render_text_report
from finsight.core.services.insight_generator import InsightGenerator
from finsight.core.services.prompt_builder import build_prompt, build_system_message
from finsight.core.services.response_parser import parse_insight_reply

__all__ = [
    "AnalyticsAggregator",
    "ExportFormat",
    "InsightGenerator",
    "build_prompt",
    "build_system_message",
    "format_amount",
    "get_currency",
    "get_currency_symbol",
    "parse_insight_reply",
    "render_report",
    "render_text_report",
]

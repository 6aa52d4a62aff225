"""Plain-text rendering of stored insights."""

from enum import Enum

from finsight.core.entities.finance import Currency
from finsight.core.entities.insight import StoredInsight
from finsight.core.exceptions import ExportFormatNotImplementedError, ValidationError
from finsight.core.services.currency import format_amount

RULE = "=" * 60


class ExportFormat(str, Enum):
    TEXT = "text"
    PDF = "pdf"


def parse_export_format(value: str | None) -> ExportFormat:
    try:
        return ExportFormat(value)
    except ValueError:
        raise ValidationError("format", 'format must be either "pdf" or "text"', value) from None


def export_filename(insight: StoredInsight, export_format: ExportFormat) -> str:
    extension = "pdf" if export_format == ExportFormat.PDF else "txt"
    return (
        f"financial-insights-{insight.period_start.isoformat()}"
        f"-to-{insight.period_end.isoformat()}.{extension}"
    )


def _section(lines: list[str], title: str) -> None:
    lines.extend([RULE, title, RULE, ""])


def render_text_report(insight: StoredInsight, currency: Currency = Currency.GBP) -> str:
    """Render an insight as a sectioned plain-text report."""
    lines: list[str] = []

    _section(lines, "FINANCIAL INSIGHTS REPORT")
    lines.append(
        f"Period: {insight.period_start.isoformat()} to {insight.period_end.isoformat()}"
    )
    lines.append(f"Generated: {insight.generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}")
    lines.append("")

    _section(lines, "MONTHLY SUMMARY")
    lines.append(insight.monthly_summary)
    lines.append("")

    if insight.category_insights:
        _section(lines, "CATEGORY INSIGHTS")
        for cat in insight.category_insights:
            lines.append(f"{cat.category}:")
            lines.append(f"  Total Spent: {format_amount(cat.total_spent, currency)}")
            lines.append(f"  Percentage: {cat.percentage_of_total:.1f}%")
            lines.append(f"  Insight: {cat.insight}")
            lines.append("")

    if insight.spending_spikes:
        _section(lines, "SPENDING ALERTS")
        for spike in insight.spending_spikes:
            lines.append(f"{spike.date} - {spike.category}:")
            lines.append(f"  Amount: {format_amount(spike.amount, currency)}")
            lines.append(f"  {spike.description}")
            lines.append("")

    if insight.recommendations:
        _section(lines, "RECOMMENDATIONS")
        for index, recommendation in enumerate(insight.recommendations, start=1):
            lines.append(f"{index}. {recommendation}")
        lines.append("")

    if insight.projections:
        projections = insight.projections
        _section(lines, "SPENDING PROJECTIONS")
        lines.append(f"Next Week: {format_amount(projections.next_week, currency)}")
        lines.append(f"Next Month: {format_amount(projections.next_month, currency)}")
        lines.append(f"Confidence: {projections.confidence.value.upper()}")
        lines.append(f"Explanation: {projections.explanation}")
        lines.append("")

    lines.extend([RULE, "END OF REPORT", RULE])
    return "\n".join(lines)


def render_report(
    insight: StoredInsight,
    export_format: ExportFormat,
    currency: Currency = Currency.GBP,
) -> str:
    """
    Render an insight in the requested format.

    Raises:
        ExportFormatNotImplementedError: PDF was requested
    """
    if export_format == ExportFormat.PDF:
        raise ExportFormatNotImplementedError(export_format.value)
    return render_text_report(insight, currency)

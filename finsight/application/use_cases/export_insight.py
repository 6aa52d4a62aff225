"""
Export Insight Use Case.

Renders a stored insight as a downloadable report in the user's currency.
"""

from dataclasses import dataclass

from finsight.config import get_logger
from finsight.core.exceptions import InsightNotFoundError, ValidationError
from finsight.core.interfaces.storage import IInsightStore, ISettingsStore
from finsight.core.services.insight_exporter import (
    ExportFormat,
    export_filename,
    parse_export_format,
    render_report,
)

logger = get_logger(__name__)


@dataclass
class ExportResult:
    """Rendered report."""

    content: str
    filename: str
    format: ExportFormat


class ExportInsightUseCase:
    """Use case for exporting a stored insight."""

    def __init__(self, insight_store: IInsightStore, settings_store: ISettingsStore) -> None:
        self._insights = insight_store
        self._settings = settings_store

    async def execute(
        self,
        user_id: str,
        insight_id: str | None,
        export_format: str | None,
    ) -> ExportResult:
        """
        Export one insight.

        Raises:
            ValidationError: Missing id or unknown format
            InsightNotFoundError: No such insight for this user
            ExportFormatNotImplementedError: PDF requested
        """
        if not insight_id:
            raise ValidationError("insightId", "insightId is required")
        fmt = parse_export_format(export_format)

        insight = await self._insights.find_by_id(insight_id, user_id)
        if insight is None:
            raise InsightNotFoundError(insight_id)

        user_settings = await self._settings.get_user_settings(user_id)
        content = render_report(insight, fmt, user_settings.currency)

        logger.info(
            "insight_exported",
            user_id=user_id,
            insight_id=insight_id,
            format=fmt.value,
            size=len(content),
        )
        return ExportResult(content=content, filename=export_filename(insight, fmt), format=fmt)

"""
Generate Insights Use Case.

Validates the requested period and hands it to the insight generator.
"""

import re
from datetime import date

from finsight.config import get_logger
from finsight.core.entities.insight import InsightPeriod, StoredInsight
from finsight.core.exceptions import ValidationError
from finsight.core.services.insight_generator import InsightGenerator

logger = get_logger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(field: str, value: str | None) -> date:
    """Parse a strict YYYY-MM-DD calendar date."""
    if not value:
        raise ValidationError(field, "startDate and endDate are required", value)
    if not DATE_RE.match(value):
        raise ValidationError(field, "Dates must be in YYYY-MM-DD format", value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(field, "Not a valid calendar date", value) from None


def parse_period(start_date: str | None, end_date: str | None) -> InsightPeriod:
    start = parse_iso_date("startDate", start_date)
    end = parse_iso_date("endDate", end_date)
    if start > end:
        raise ValidationError(
            "startDate", "startDate must be before or equal to endDate", start_date
        )
    return InsightPeriod(start=start, end=end)


class GenerateInsightsUseCase:
    """Use case for generating (or reusing) insights for a period."""

    def __init__(self, generator: InsightGenerator) -> None:
        self._generator = generator

    async def execute(
        self,
        user_id: str,
        start_date: str | None,
        end_date: str | None,
    ) -> StoredInsight:
        """
        Generate insights for the inclusive period.

        Args:
            user_id: Authenticated user
            start_date: YYYY-MM-DD
            end_date: YYYY-MM-DD, not before start_date

        Returns:
            StoredInsight, fresh, reused or degraded

        Raises:
            ValidationError: Missing or malformed dates, or start after end
            FallbackExhaustedError: Nothing could be produced
        """
        period = parse_period(start_date, end_date)
        logger.info(
            "generate_insights_requested",
            user_id=user_id,
            period_start=period.start.isoformat(),
            period_end=period.end.isoformat(),
        )
        return await self._generator.generate(user_id, period)

"""Get Latest Insights Use Case."""

from finsight.core.entities.insight import StoredInsight
from finsight.core.services.insight_generator import InsightGenerator


class GetLatestInsightsUseCase:
    """Returns the user's most recent insight, if any."""

    def __init__(self, generator: InsightGenerator) -> None:
        self._generator = generator

    async def execute(self, user_id: str) -> StoredInsight | None:
        return await self._generator.get_latest(user_id)

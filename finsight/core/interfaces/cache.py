"""Abstract interface for the insight cache."""

from abc import ABC, abstractmethod
from datetime import date

from finsight.core.entities.insight import StoredInsight


class IInsightCache(ABC):
    """Time-bounded memoization of insights keyed by (user, period)."""

    @abstractmethod
    def get(self, user_id: str, period_start: date, period_end: date) -> StoredInsight | None:
        pass

    @abstractmethod
    def put(
        self, user_id: str, period_start: date, period_end: date, value: StoredInsight
    ) -> None:
        pass

    @abstractmethod
    def clear_user(self, user_id: str) -> int:
        """Drop every entry for one user. Returns the number removed."""
        pass

    @abstractmethod
    def clear_all(self) -> None:
        pass

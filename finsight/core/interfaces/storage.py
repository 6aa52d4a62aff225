"""
Abstract interfaces for storage providers.

Defines contracts for the transaction, budget, settings and insight stores.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from finsight.core.entities.finance import (
    Budget,
    BudgetProgress,
    Transaction,
    TransactionFilters,
    UserSettings,
)
from finsight.core.entities.insight import StoredInsight


class ITransactionStore(ABC):
    """Read access to a user's transactions."""

    @abstractmethod
    async def find_transactions(
        self,
        user_id: str,
        filters: TransactionFilters | None = None,
    ) -> list[Transaction]:
        """Find transactions matching filters, newest first."""
        pass


class IBudgetStore(ABC):
    """Read access to a user's budgets."""

    @abstractmethod
    async def find_budgets(self, user_id: str) -> list[Budget]:
        """List all budgets for a user."""
        pass

    @abstractmethod
    async def get_budget_progress(
        self, user_id: str, budget_id: str, today: date | None = None
    ) -> BudgetProgress | None:
        """Compute spending against one budget."""
        pass


class ISettingsStore(ABC):
    """Read access to user preferences."""

    @abstractmethod
    async def get_user_settings(self, user_id: str) -> UserSettings:
        """Get settings, falling back to defaults when none are stored."""
        pass


class IInsightStore(ABC):
    """
    Persistent insight records.

    Identity for lookup is (user_id, period_start, period_end).
    """

    @abstractmethod
    async def find_by_period(
        self, user_id: str, period_start: date, period_end: date
    ) -> StoredInsight | None:
        """Most recent insight for exactly this period."""
        pass

    @abstractmethod
    async def find_latest(self, user_id: str) -> StoredInsight | None:
        """Most recent insight for the user, any period."""
        pass

    @abstractmethod
    async def find_by_id(self, insight_id: str, user_id: str) -> StoredInsight | None:
        """Get one insight owned by the user."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str, limit: int | None = None) -> list[StoredInsight]:
        """List insights for the user, newest first."""
        pass

    @abstractmethod
    async def create(self, user_id: str, payload: dict[str, Any]) -> StoredInsight:
        """Persist a new insight record."""
        pass

    @abstractmethod
    async def delete(self, insight_id: str, user_id: str) -> bool:
        """Delete one insight owned by the user."""
        pass

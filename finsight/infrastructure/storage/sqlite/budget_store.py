"""
SQLite implementation of budget storage.

Progress is computed from transactions inside the budget's window:
the custom period, or the current calendar month for monthly budgets.
"""

import calendar
import uuid
from datetime import date
from decimal import Decimal

import aiosqlite

from finsight.config import get_logger
from finsight.core.entities.finance import Budget, BudgetPeriod, BudgetProgress
from finsight.core.interfaces.storage import IBudgetStore
from finsight.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


def budget_window(budget: Budget, today: date | None = None) -> tuple[date, date]:
    """Inclusive date range a budget tracks."""
    if budget.period_type == BudgetPeriod.CUSTOM and budget.period_start and budget.period_end:
        return budget.period_start, budget.period_end

    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


class SQLiteBudgetStore(IBudgetStore):
    """SQLite implementation of budget storage."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    async def create(self, budget: Budget) -> Budget:
        async with get_transaction(self._pool) as conn:
            await conn.execute(
                """
                INSERT INTO budgets (
                    id, user_id, name, amount, period_type,
                    period_start, period_end, category
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    budget.id,
                    budget.user_id,
                    budget.name,
                    str(budget.amount),
                    budget.period_type.value,
                    budget.period_start.isoformat() if budget.period_start else None,
                    budget.period_end.isoformat() if budget.period_end else None,
                    budget.category,
                ),
            )
        logger.info("budget_created", budget_id=budget.id, name=budget.name)
        return budget

    async def add(
        self,
        user_id: str,
        name: str,
        amount: Decimal | float | str,
        category: str | None = None,
        period_start: date | None = None,
        period_end: date | None = None,
    ) -> Budget:
        """Create a budget; custom when both period bounds are given."""
        custom = period_start is not None and period_end is not None
        return await self.create(
            Budget(
                id=str(uuid.uuid4()),
                user_id=user_id,
                name=name,
                amount=Decimal(str(amount)),
                period_type=BudgetPeriod.CUSTOM if custom else BudgetPeriod.MONTHLY,
                period_start=period_start,
                period_end=period_end,
                category=category,
            )
        )

    async def find_budgets(self, user_id: str) -> list[Budget]:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                "SELECT * FROM budgets WHERE user_id = ? ORDER BY created_at, rowid",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def find_by_id(self, budget_id: str, user_id: str) -> Budget | None:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                "SELECT * FROM budgets WHERE id = ? AND user_id = ?",
                (budget_id, user_id),
            )
            row = await cursor.fetchone()
            return self._row_to_entity(row) if row else None

    async def get_budget_progress(
        self, user_id: str, budget_id: str, today: date | None = None
    ) -> BudgetProgress | None:
        budget = await self.find_by_id(budget_id, user_id)
        if budget is None:
            return None

        start, end = budget_window(budget, today)
        query = (
            "SELECT COALESCE(SUM(amount), 0) AS spent FROM transactions "
            "WHERE user_id = ? AND date >= ? AND date <= ?"
        )
        params: list = [user_id, start.isoformat(), end.isoformat()]
        if budget.category:
            query += " AND category = ?"
            params.append(budget.category)

        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()

        spent = Decimal(str(row["spent"]))
        return BudgetProgress(
            budget=budget,
            current_spending=spent,
            percentage=float(spent / budget.amount * 100),
            remaining=budget.amount - spent,
        )

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Budget:
        return Budget(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            amount=Decimal(str(row["amount"])),
            period_type=BudgetPeriod(row["period_type"]),
            period_start=date.fromisoformat(row["period_start"]) if row["period_start"] else None,
            period_end=date.fromisoformat(row["period_end"]) if row["period_end"] else None,
            category=row["category"],
        )

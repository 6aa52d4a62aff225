"""
SQLite implementation of transaction storage.

Filtered reads for analytics plus inserts for seeding and imports.
"""

import uuid
from datetime import date
from decimal import Decimal

import aiosqlite

from finsight.config import get_logger
from finsight.core.entities.finance import Transaction, TransactionFilters
from finsight.core.interfaces.storage import ITransactionStore
from finsight.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteTransactionStore(ITransactionStore):
    """SQLite implementation of transaction storage."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    async def create(self, transaction: Transaction) -> Transaction:
        async with get_transaction(self._pool) as conn:
            await conn.execute(
                """
                INSERT INTO transactions (id, user_id, date, amount, category, merchant, notes)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.id,
                    transaction.user_id,
                    transaction.date.isoformat(),
                    str(transaction.amount),
                    transaction.category,
                    transaction.merchant,
                    transaction.notes,
                ),
            )
        logger.debug("transaction_created", transaction_id=transaction.id)
        return transaction

    async def add(
        self,
        user_id: str,
        day: date,
        amount: Decimal | float | str,
        category: str,
        merchant: str | None = None,
        notes: str | None = None,
    ) -> Transaction:
        """Create a transaction from plain values with a generated id."""
        return await self.create(
            Transaction(
                id=str(uuid.uuid4()),
                user_id=user_id,
                date=day,
                amount=Decimal(str(amount)),
                category=category,
                merchant=merchant,
                notes=notes,
            )
        )

    async def find_transactions(
        self,
        user_id: str,
        filters: TransactionFilters | None = None,
    ) -> list[Transaction]:
        """Find transactions matching filters, newest first."""
        filters = filters or TransactionFilters()
        clauses = ["user_id = ?"]
        params: list = [user_id]

        if filters.start_date:
            clauses.append("date >= ?")
            params.append(filters.start_date.isoformat())
        if filters.end_date:
            clauses.append("date <= ?")
            params.append(filters.end_date.isoformat())
        if filters.category:
            clauses.append("category = ?")
            params.append(filters.category)
        if filters.min_amount is not None:
            clauses.append("amount >= ?")
            params.append(float(filters.min_amount))
        if filters.max_amount is not None:
            clauses.append("amount <= ?")
            params.append(float(filters.max_amount))
        if filters.merchant:
            # LIKE is case-insensitive for ASCII in SQLite
            clauses.append("merchant LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(filters.merchant)}%")

        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM transactions
                WHERE {" AND ".join(clauses)}
                ORDER BY date DESC, created_at DESC
                """,
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            date=date.fromisoformat(row["date"]),
            amount=Decimal(str(row["amount"])),
            category=row["category"],
            merchant=row["merchant"],
            notes=row["notes"],
        )

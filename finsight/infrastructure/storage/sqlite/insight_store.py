"""
SQLite implementation of insight storage.

List-valued fields are stored as JSON text. Newest-first ordering uses
generated_at with rowid as the tie-breaker.
"""

import json
from datetime import date, datetime
from typing import Any

import aiosqlite

from finsight.config import get_logger
from finsight.core.entities.insight import StoredInsight
from finsight.core.exceptions import PersistenceError
from finsight.core.interfaces.storage import IInsightStore
from finsight.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

NEWEST_FIRST = "ORDER BY generated_at DESC, rowid DESC"


class SQLiteInsightStore(IInsightStore):
    """SQLite implementation of insight storage."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        self._pool = pool

    async def create(self, user_id: str, payload: dict[str, Any]) -> StoredInsight:
        """Persist a new insight built from payload fields."""
        insight = StoredInsight.model_validate({**payload, "user_id": user_id})
        data = insight.model_dump(mode="json")

        try:
            async with get_transaction(self._pool) as conn:
                await conn.execute(
                    """
                    INSERT INTO ai_insights (
                        id, user_id, period_start, period_end, monthly_summary,
                        category_insights, spending_spikes, recommendations,
                        projections, generated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        insight.id,
                        user_id,
                        insight.period_start.isoformat(),
                        insight.period_end.isoformat(),
                        insight.monthly_summary,
                        json.dumps(data["category_insights"]),
                        json.dumps(data["spending_spikes"]),
                        json.dumps(data["recommendations"]),
                        json.dumps(data["projections"]) if data["projections"] else None,
                        insight.generated_at.isoformat(timespec="microseconds"),
                    ),
                )
        except aiosqlite.Error as e:
            raise PersistenceError("create_insight", str(e)) from e

        logger.info(
            "insight_created",
            insight_id=insight.id,
            user_id=user_id,
            period_start=data["period_start"],
            period_end=data["period_end"],
        )
        return insight

    async def find_by_period(
        self, user_id: str, period_start: date, period_end: date
    ) -> StoredInsight | None:
        row = await self._fetch_one(
            f"""
            SELECT * FROM ai_insights
            WHERE user_id = ? AND period_start = ? AND period_end = ?
            {NEWEST_FIRST} LIMIT 1
            """,
            (user_id, period_start.isoformat(), period_end.isoformat()),
            "find_insight_by_period",
        )
        return self._row_to_entity(row) if row else None

    async def find_latest(self, user_id: str) -> StoredInsight | None:
        row = await self._fetch_one(
            f"SELECT * FROM ai_insights WHERE user_id = ? {NEWEST_FIRST} LIMIT 1",
            (user_id,),
            "find_latest_insight",
        )
        return self._row_to_entity(row) if row else None

    async def find_by_id(self, insight_id: str, user_id: str) -> StoredInsight | None:
        row = await self._fetch_one(
            "SELECT * FROM ai_insights WHERE id = ? AND user_id = ?",
            (insight_id, user_id),
            "find_insight_by_id",
        )
        return self._row_to_entity(row) if row else None

    async def list_for_user(self, user_id: str, limit: int | None = None) -> list[StoredInsight]:
        query = f"SELECT * FROM ai_insights WHERE user_id = ? {NEWEST_FIRST}"
        params: tuple = (user_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (user_id, limit)

        try:
            async with get_connection(self._pool) as conn:
                cursor = await conn.execute(query, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("list_insights", str(e)) from e
        return [self._row_to_entity(row) for row in rows]

    async def delete(self, insight_id: str, user_id: str) -> bool:
        try:
            async with get_transaction(self._pool) as conn:
                cursor = await conn.execute(
                    "DELETE FROM ai_insights WHERE id = ? AND user_id = ?",
                    (insight_id, user_id),
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise PersistenceError("delete_insight", str(e)) from e

        if deleted:
            logger.info("insight_deleted", insight_id=insight_id, user_id=user_id)
        return deleted

    async def _fetch_one(
        self, query: str, params: tuple, operation: str
    ) -> aiosqlite.Row | None:
        try:
            async with get_connection(self._pool) as conn:
                cursor = await conn.execute(query, params)
                return await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError(operation, str(e)) from e

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> StoredInsight:
        return StoredInsight(
            id=row["id"],
            user_id=row["user_id"],
            period_start=date.fromisoformat(row["period_start"]),
            period_end=date.fromisoformat(row["period_end"]),
            monthly_summary=row["monthly_summary"],
            category_insights=json.loads(row["category_insights"] or "[]"),
            spending_spikes=json.loads(row["spending_spikes"] or "[]"),
            recommendations=json.loads(row["recommendations"] or "[]"),
            projections=json.loads(row["projections"]) if row["projections"] else None,
            generated_at=datetime.fromisoformat(row["generated_at"]),
        )

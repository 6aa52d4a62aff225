"""SQLite implementation of user settings storage."""

from finsight.config import get_logger
from finsight.core.entities.finance import Currency, UserSettings
from finsight.core.interfaces.storage import ISettingsStore
from finsight.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


class SQLiteSettingsStore(ISettingsStore):
    """SQLite implementation of user settings storage."""

    def __init__(
        self,
        pool: ConnectionPool | None = None,
        default_currency: Currency = Currency.GBP,
    ) -> None:
        self._pool = pool
        self._default_currency = default_currency

    async def get_user_settings(self, user_id: str) -> UserSettings:
        async with get_connection(self._pool) as conn:
            cursor = await conn.execute(
                "SELECT currency FROM user_settings WHERE user_id = ?", (user_id,)
            )
            row = await cursor.fetchone()

        if row is None:
            return UserSettings(user_id=user_id, currency=self._default_currency)
        return UserSettings(user_id=user_id, currency=Currency(row["currency"]))

    async def save_user_settings(self, settings: UserSettings) -> UserSettings:
        async with get_transaction(self._pool) as conn:
            await conn.execute(
                """
                INSERT INTO user_settings (user_id, currency)
                VALUES (?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    currency = excluded.currency,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (settings.user_id, settings.currency.value),
            )
        logger.info("user_settings_saved", user_id=settings.user_id, currency=settings.currency.value)
        return settings

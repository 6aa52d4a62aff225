"""Storage infrastructure implementations."""

from finsight.infrastructure.storage.sqlite import (
    SQLiteBudgetStore,
    SQLiteInsightStore,
    SQLiteSettingsStore,
    SQLiteTransactionStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteBudgetStore",
    "SQLiteInsightStore",
    "SQLiteSettingsStore",
    "SQLiteTransactionStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]

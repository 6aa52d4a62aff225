"""SQLite storage implementations."""

from finsight.infrastructure.storage.sqlite.budget_store import SQLiteBudgetStore
from finsight.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from finsight.infrastructure.storage.sqlite.insight_store import SQLiteInsightStore
from finsight.infrastructure.storage.sqlite.settings_store import SQLiteSettingsStore
from finsight.infrastructure.storage.sqlite.transaction_store import SQLiteTransactionStore

__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteBudgetStore",
    "SQLiteInsightStore",
    "SQLiteSettingsStore",
    "SQLiteTransactionStore",
]

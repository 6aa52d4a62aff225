"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from finsight.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteBudgetStore,
    SQLiteInsightStore,
    SQLiteSettingsStore,
    SQLiteTransactionStore,
)
from finsight.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def db_pool(temp_db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Migrated temporary database behind a small pool."""
    await initialize_database(temp_db_path, create_backup_before=False)
    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=5000)
    yield pool
    await pool.close()


@pytest.fixture
def insight_db(db_pool: ConnectionPool) -> SQLiteInsightStore:
    return SQLiteInsightStore(db_pool)


@pytest.fixture
def transaction_db(db_pool: ConnectionPool) -> SQLiteTransactionStore:
    return SQLiteTransactionStore(db_pool)


@pytest.fixture
def budget_db(db_pool: ConnectionPool) -> SQLiteBudgetStore:
    return SQLiteBudgetStore(db_pool)


@pytest.fixture
def settings_db(db_pool: ConnectionPool) -> SQLiteSettingsStore:
    return SQLiteSettingsStore(db_pool)

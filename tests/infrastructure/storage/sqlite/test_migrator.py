"""Unit tests for the database migrator."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from finsight.infrastructure.storage.sqlite.migrations import migrator
from finsight.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    restore_backup,
)


class TestMigrationInfo:
    """Tests for MigrationInfo."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        """Test from file parses filename."""
        path = tmp_path / "v002_add_index.sql"
        path.write_text("SELECT 1;")

        info = MigrationInfo.from_file(path)

        assert info.version == "002"
        assert info.name == "add_index"
        assert len(info.checksum) == 16

    def test_checksum_tracks_content(self, tmp_path: Path):
        """Test checksum tracks content."""
        first = tmp_path / "v001_a.sql"
        second = tmp_path / "v002_b.sql"
        first.write_text("SELECT 1;")
        second.write_text("SELECT 2;")

        assert MigrationInfo.from_file(first).checksum != MigrationInfo.from_file(second).checksum

    def test_invalid_filename_rejected(self, tmp_path: Path):
        """Test invalid filename rejected."""
        path = tmp_path / "initial.sql"
        path.write_text("SELECT 1;")
        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(path)


class TestDiscoverMigrations:
    """Tests for discover_migrations()."""

    def test_ships_initial_schema(self):
        """Test ships initial schema."""
        migrations = discover_migrations()
        assert migrations[0].version == "001"
        assert migrations[0].name == "initial"

    def test_sorted_and_skips_invalid(self, tmp_path: Path):
        """Test sorted and skips invalid."""
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "vbad.sql").write_text("SELECT 3;")

        with patch.object(migrator, "MIGRATIONS_DIR", tmp_path):
            versions = [m.version for m in discover_migrations()]

        assert versions == ["001", "002"]


class TestInitializeDatabase:
    """Tests for initialize_database()."""

    async def test_creates_schema(self, temp_db_path: Path):
        """Test that initialization creates every table."""
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert [r.version for r in results] == ["001"]
        assert all(r.success for r in results)

        async with aiosqlite.connect(temp_db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
        assert set(REQUIRED_TABLES) <= tables

    async def test_second_run_applies_nothing(self, temp_db_path: Path):
        """Test second run applies nothing."""
        await initialize_database(temp_db_path, create_backup_before=False)
        assert await initialize_database(temp_db_path, create_backup_before=False) == []

    async def test_records_applied_migrations(self, temp_db_path: Path):
        """Test records applied migrations."""
        await initialize_database(temp_db_path, create_backup_before=False)

        async with aiosqlite.connect(temp_db_path) as conn:
            applied = await get_applied_migrations(conn)

        assert list(applied) == ["001"]

    async def test_backup_removed_after_success(self, temp_db_path: Path):
        """Test backup removed after success."""
        await initialize_database(temp_db_path, create_backup_before=False)
        await initialize_database(temp_db_path, create_backup_before=True)

        assert list(temp_db_path.parent.glob("*.backup_*")) == []

    async def test_failed_migration_reported(self, temp_db_path: Path, tmp_path: Path):
        """Test failed migration reported."""
        migrations_dir = tmp_path / "migrations"
        migrations_dir.mkdir()
        (migrations_dir / "v001_broken.sql").write_text("CREATE TABLE (;")

        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            results = await initialize_database(temp_db_path, create_backup_before=False)

        assert len(results) == 1
        assert results[0].success is False
        assert results[0].error

    async def test_no_migrations(self, temp_db_path: Path, tmp_path: Path):
        """Test initialization with an empty migrations directory."""
        empty = tmp_path / "empty"
        empty.mkdir()
        with patch.object(migrator, "MIGRATIONS_DIR", empty):
            assert await initialize_database(temp_db_path, create_backup_before=False) == []


class TestGetAppliedMigrations:
    """Tests for get_applied_migrations()."""

    async def test_missing_table_returns_empty(self, temp_db_path: Path):
        """Test missing table returns empty."""
        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_applied_migrations(conn) == {}


class TestBackups:
    """Tests for create_backup() and restore_backup()."""

    def test_backup_and_restore(self, tmp_path: Path):
        """Test backup and restore."""
        db_path = tmp_path / "test.db"
        db_path.write_bytes(b"original")

        backup = create_backup(db_path)
        db_path.write_bytes(b"changed")
        restore_backup(db_path, backup)

        assert backup.exists()
        assert ".backup_" in backup.name
        assert db_path.read_bytes() == b"original"


class TestMigrationStatus:
    """Tests for get_migration_status()."""

    async def test_missing_database(self, temp_db_path: Path):
        """Test status for a database file that does not exist."""
        status = await get_migration_status(temp_db_path)

        assert status["exists"] is False
        assert status["pending_migrations"] == ["001"]
        assert status["missing_tables"] == list(REQUIRED_TABLES)

    async def test_migrated_database(self, temp_db_path: Path):
        """Test status after all migrations are applied."""
        await initialize_database(temp_db_path, create_backup_before=False)

        status = await get_migration_status(temp_db_path)

        assert status["exists"] is True
        assert status["current_version"] == "001"
        assert status["applied_migrations"] == ["001"]
        assert status["pending_migrations"] == []
        assert status["missing_tables"] == []

    async def test_defaults_to_settings_path(self):
        """Test defaults to settings path."""
        await initialize_database(create_backup_before=False)
        status = await get_migration_status()
        assert status["exists"] is True

"""Unit tests for database connection management."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from attendance.exceptions import DatabaseConnectionError
from attendance.utils.db import DatabaseManager, get_db_url, init_db


class TestDatabaseManager:
    """Tests for DatabaseManager."""

    def test_get_db_url_from_settings(self, settings):
        assert get_db_url() == settings.db_url
        assert get_db_url().startswith("postgresql+asyncpg://")

    def test_init_engine_created_once(self):
        manager = DatabaseManager()
        with patch("attendance.utils.db.create_async_engine") as create_engine:
            first = manager.init_engine()
            second = manager.init_engine()

        assert first is second
        create_engine.assert_called_once()

    @pytest.mark.asyncio
    async def test_verify_connection_wraps_errors(self):
        manager = DatabaseManager()
        engine = MagicMock()
        engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        manager._engine = engine

        with pytest.raises(DatabaseConnectionError):
            await manager.verify_connection()

    @pytest.mark.asyncio
    async def test_run_migrations_upgrades_to_head(self):
        manager = DatabaseManager()
        with patch("alembic.command.upgrade") as upgrade:
            await manager.run_migrations()

        config, revision = upgrade.call_args.args
        assert revision == "head"
        assert config.get_main_option("script_location").endswith("alembic")
        assert config.attributes["configure_logger"] is False

    @pytest.mark.asyncio
    async def test_close_disposes_engine(self):
        manager = DatabaseManager()
        engine = MagicMock()
        engine.dispose = AsyncMock()
        manager._engine = engine

        await manager.close()

        engine.dispose.assert_awaited_once()
        assert manager._engine is None


class TestInitDb:
    @pytest.mark.asyncio
    async def test_migrates_then_verifies(self):
        with patch("attendance.utils.db.db_manager") as manager:
            manager.run_migrations = AsyncMock()
            manager.verify_connection = AsyncMock()

            await init_db()

        manager.run_migrations.assert_awaited_once()
        manager.verify_connection.assert_awaited_once()

"""Database lifecycle tests with DatabaseClient and apply_migrations patched."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.config import Settings
from app.core import database
from app.core.migrations import MigrationError


@pytest.fixture(autouse=True)
def reset_container():
    database._container.client = None
    yield
    database._container.client = None


def test_get_db_client_before_init() -> None:
    with pytest.raises(RuntimeError, match="not initialized"):
        database.get_db_client()


def test_collection_accessors_require_connection(mock_settings: Settings) -> None:
    client = database.DatabaseClient(mock_settings)

    with pytest.raises(RuntimeError):
        client.get_embed_cache_collection()


@pytest.mark.asyncio
class TestInitDB:
    async def test_connect_and_migrate(self, mock_settings: Settings) -> None:
        with (
            patch.object(database.DatabaseClient, "connect", AsyncMock(return_value=True)),
            patch.object(database.DatabaseClient, "get_database", MagicMock()),
            patch("app.core.migrations.apply_migrations", AsyncMock(return_value=3)) as migrate,
        ):
            client = await database.init_db(mock_settings)

        assert database.get_db_client() is client
        migrate.assert_awaited_once()

    async def test_connection_failure(self, mock_settings: Settings) -> None:
        with patch.object(database.DatabaseClient, "connect", AsyncMock(return_value=False)):
            with pytest.raises(RuntimeError, match="Failed to establish MongoDB connection"):
                await database.init_db(mock_settings)

        assert database._container.client is None

    async def test_migration_failure_closes_connection(self, mock_settings: Settings) -> None:
        close = AsyncMock()
        with (
            patch.object(database.DatabaseClient, "connect", AsyncMock(return_value=True)),
            patch.object(database.DatabaseClient, "get_database", MagicMock()),
            patch.object(database.DatabaseClient, "close", close),
            patch(
                "app.core.migrations.apply_migrations",
                AsyncMock(side_effect=MigrationError("step 2 failed")),
            ),
        ):
            with pytest.raises(MigrationError):
                await database.init_db(mock_settings)

        close.assert_awaited_once()
        assert database._container.client is None

    async def test_close_db_resets_singleton(self, mock_settings: Settings) -> None:
        client = MagicMock()
        client.close = AsyncMock()
        database._container.client = client

        await database.close_db()

        client.close.assert_awaited_once()
        assert database._container.client is None

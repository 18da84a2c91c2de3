"""
MongoDB Database Client Module

This module provides async MongoDB connection management for the embed
cache using Motor. It implements:
- Connection pooling with configurable pool size
- Health checks using the MongoDB ping command
- Collection accessors for the embed cache and schema version bookkeeping
- Startup/shutdown lifecycle management for FastAPI integration, applying
  pending schema migrations on startup
- Retry logic with exponential backoff for connection reliability
"""

import asyncio
import logging

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from app.config import Settings


# Configure module logger for structured logging
logger = logging.getLogger(__name__)

# Collection name constants for consistency
EMBED_CACHE_COLLECTION = "embed_cache"
SCHEMA_VERSION_COLLECTION = "schema_version"


class DatabaseClient:
    """
    Async MongoDB client wrapper with connection pooling and lifecycle management.

    Attributes:
        _mongodb_uri: MongoDB connection URI
        _db_name: Database name to connect to
        _min_pool_size: Minimum number of connections in pool
        _max_pool_size: Maximum number of connections in pool
        _client: Motor async MongoDB client instance
        _database: Motor async database instance

    Example usage:
        ```python
        db_client = DatabaseClient(Settings())
        await db_client.connect()

        cache = EmbedCache(db_client.get_embed_cache_collection())

        await db_client.close()
        ```
    """

    def __init__(self, settings: Settings) -> None:
        self._mongodb_uri = settings.mongodb_uri
        self._db_name = settings.mongodb_db_name
        self._min_pool_size = settings.mongodb_min_pool_size
        self._max_pool_size = settings.mongodb_max_pool_size
        self._client: AsyncIOMotorClient | None = None
        self._database: AsyncIOMotorDatabase | None = None

    async def connect(self, max_retries: int = 3) -> bool:
        """
        Establish MongoDB connection with retry logic and exponential backoff.

        Args:
            max_retries: Connection attempts before giving up (delays 1s, 2s, 4s...)

        Returns:
            bool: True if connection successful, False on failure after all retries.
        """
        retry_delay = 1.0

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(
                    f"Attempting MongoDB connection (attempt {attempt}/{max_retries}) "
                    f"to {self._db_name}..."
                )

                self._client = AsyncIOMotorClient(
                    self._mongodb_uri,
                    minPoolSize=self._min_pool_size,
                    maxPoolSize=self._max_pool_size,
                    serverSelectionTimeoutMS=5000,
                )
                self._database = self._client[self._db_name]

                await self._client.admin.command("ping")

                logger.info(f"Successfully connected to MongoDB database: {self._db_name}")
                return True

            except (ServerSelectionTimeoutError, ConnectionFailure):
                logger.exception(f"MongoDB connection failure (attempt {attempt}/{max_retries})")
                if attempt < max_retries:
                    logger.warning(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2

        logger.error(
            f"Failed to connect to MongoDB after {max_retries} attempts. "
            "Check connection URI and server availability."
        )
        return False

    async def close(self) -> None:
        """Close the MongoDB connection. Safe to call when not connected."""
        if self._client is None:
            logger.warning("MongoDB close called but no active connection exists")
            return

        self._client.close()
        self._client = None
        self._database = None
        logger.info(f"MongoDB connection closed for database: {self._db_name}")

    async def ping(self) -> bool:
        """
        Health check using MongoDB admin ping command.

        Returns:
            bool: True if ping successful, False on failure.
        """
        if self._client is None:
            logger.warning("MongoDB ping failed: No active connection")
            return False

        try:
            await self._client.admin.command("ping")
            return True
        except PyMongoError:
            logger.exception("MongoDB ping failed")
            return False

    def get_database(self) -> AsyncIOMotorDatabase:
        """
        Get the database instance for direct operations.

        Raises:
            RuntimeError: If not connected to MongoDB.
        """
        if self._database is None:
            raise RuntimeError(
                "MongoDB database not available. Call connect() first or check connection status."
            )
        return self._database

    def get_embed_cache_collection(self) -> AsyncIOMotorCollection:
        """
        Get the embed_cache collection.

        One document per resolved video, keyed by "<provider>:<video_id>".

        Raises:
            RuntimeError: If not connected to MongoDB.
        """
        return self.get_database()[EMBED_CACHE_COLLECTION]

    def get_schema_version_collection(self) -> AsyncIOMotorCollection:
        """
        Get the schema_version collection used by the migration runner.

        Raises:
            RuntimeError: If not connected to MongoDB.
        """
        return self.get_database()[SCHEMA_VERSION_COLLECTION]


# Container class for database client singleton to avoid global statements
class _DatabaseClientContainer:
    """Container for database client singleton to avoid global statements."""

    client: DatabaseClient | None = None


_container = _DatabaseClientContainer()


async def init_db(settings: Settings | None = None) -> DatabaseClient:
    """
    Initialize the global database client singleton.

    Connects to MongoDB and applies pending schema migrations. Called during
    FastAPI application startup.

    Args:
        settings: Optional Settings instance. If None, creates new Settings().

    Returns:
        DatabaseClient: The initialized database client instance.

    Raises:
        RuntimeError: If connection to MongoDB fails after all retries.
        MigrationError: If a schema migration step fails.
    """
    # Imported here: migrations depends on this module's collection names
    from app.core.migrations import apply_migrations

    if _container.client is not None:
        logger.warning("Database client already initialized, returning existing instance")
        return _container.client

    if settings is None:
        settings = Settings()

    logger.info("Initializing MongoDB database client...")

    client = DatabaseClient(settings)
    if not await client.connect():
        raise RuntimeError(
            "Failed to establish MongoDB connection. "
            "Check mongodb_uri configuration and server availability."
        )

    try:
        await apply_migrations(client.get_database())
    except Exception:
        await client.close()
        raise

    _container.client = client
    logger.info("MongoDB database client initialization complete")
    return client


async def close_db() -> None:
    """Close the global database client connection during application shutdown."""
    if _container.client is not None:
        logger.info("Closing MongoDB database client...")
        await _container.client.close()
        _container.client = None
    else:
        logger.warning("close_db called but no database client exists")


def get_db_client() -> DatabaseClient:
    """
    Get the global database client singleton instance.

    Raises:
        RuntimeError: If database client has not been initialized.
    """
    if _container.client is None:
        raise RuntimeError(
            "Database client not initialized. Call init_db() first during application startup."
        )
    return _container.client

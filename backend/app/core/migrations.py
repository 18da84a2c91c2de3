"""
Schema Migrations for the Embed Cache

Ordered, idempotent steps that bring the embed cache storage up to the
current schema version. The applied version is recorded in the
schema_version collection; each step is keyed by the version it produces.

apply_migrations() runs every step newer than the stored version in order,
persisting the new version after each success. The first failing step
raises MigrationError and leaves the stored version at the last good step.
"""

import logging

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from app.core.database import EMBED_CACHE_COLLECTION, SCHEMA_VERSION_COLLECTION


logger = logging.getLogger(__name__)

# _id of the version document in the schema_version collection
SCHEMA_NAME = "embed_cache"


class MigrationError(RuntimeError):
    """A schema migration step failed; the service must not start."""


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    apply: Callable[[AsyncIOMotorDatabase], Awaitable[None]]


# =============================================================================
# Migration steps
# =============================================================================


async def _create_created_at_index(database: AsyncIOMotorDatabase) -> None:
    await database[EMBED_CACHE_COLLECTION].create_index(
        [("created_at", ASCENDING)], name="created_at_1"
    )


async def _create_provider_video_index(database: AsyncIOMotorDatabase) -> None:
    await database[EMBED_CACHE_COLLECTION].create_index(
        [("provider", ASCENDING), ("video_id", ASCENDING)], name="provider_1_video_id_1"
    )


async def _backfill_aspect_ratio(database: AsyncIOMotorDatabase) -> None:
    # Rows written before aspect ratios were recorded get 0.0 (unknown)
    result = await database[EMBED_CACHE_COLLECTION].update_many(
        {"aspect_ratio": {"$exists": False}}, {"$set": {"aspect_ratio": 0.0}}
    )
    logger.info(f"Backfilled aspect_ratio on {result.modified_count} cached embed(s)")


MIGRATIONS: list[Migration] = [
    Migration(1, "index embed_cache.created_at", _create_created_at_index),
    Migration(2, "index embed_cache.(provider, video_id)", _create_provider_video_index),
    Migration(3, "backfill missing aspect_ratio with 0", _backfill_aspect_ratio),
]

LATEST_VERSION: int = MIGRATIONS[-1].version


# =============================================================================
# Runner
# =============================================================================


async def get_schema_version(database: AsyncIOMotorDatabase) -> int:
    """Currently applied schema version, 0 for a fresh database."""
    document = await database[SCHEMA_VERSION_COLLECTION].find_one({"_id": SCHEMA_NAME})
    if document is None:
        return 0
    return int(document.get("version", 0))


async def _set_schema_version(database: AsyncIOMotorDatabase, version: int) -> None:
    await database[SCHEMA_VERSION_COLLECTION].update_one(
        {"_id": SCHEMA_NAME},
        {"$set": {"version": version, "updated_at": datetime.now(UTC)}},
        upsert=True,
    )


async def apply_migrations(
    database: AsyncIOMotorDatabase,
    migrations: list[Migration] | None = None,
) -> int:
    """
    Apply pending migrations in version order.

    Args:
        database: Target Motor database
        migrations: Steps to consider (defaults to MIGRATIONS)

    Returns:
        int: Schema version after the run.

    Raises:
        MigrationError: If a step fails. Earlier steps stay applied.
    """
    steps = sorted(migrations if migrations is not None else MIGRATIONS, key=lambda m: m.version)

    try:
        current = await get_schema_version(database)
    except Exception as e:
        raise MigrationError(f"Could not read schema version: {e}") from e

    pending = [step for step in steps if step.version > current]
    if not pending:
        logger.info(f"Embed cache schema is up to date (version {current})")
        return current

    for step in pending:
        logger.info(f"Applying migration {step.version}: {step.description}")
        try:
            await step.apply(database)
            await _set_schema_version(database, step.version)
        except Exception as e:
            logger.exception(f"Migration {step.version} failed")
            raise MigrationError(
                f"Migration {step.version} ({step.description}) failed: {e}"
            ) from e
        current = step.version

    logger.info(f"Embed cache schema migrated to version {current}")
    return current


__all__ = [
    "LATEST_VERSION",
    "MIGRATIONS",
    "Migration",
    "MigrationError",
    "apply_migrations",
    "get_schema_version",
]

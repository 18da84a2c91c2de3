"""
Embed Cache Service Module

Durable MongoDB-backed store of resolved embed markup, keyed by provider and
video identifier. It is the single authority for avoiding repeated oEmbed
requests: a document is written once after the first successful fetch and
read on every later occurrence of the same video.

Storage layout (collection "embed_cache"):
    {
        "_id": "youtube:Wl4XiYadV_k",
        "provider": "youtube",
        "video_id": "Wl4XiYadV_k",
        "embed_markup": "<iframe ...></iframe>",
        "aspect_ratio": 1.7778,        # 0.0 when unknown
        "created_at": datetime
    }

Failures never propagate to the caller: a failed read behaves like a miss
and a failed write only loses the chance to reuse the markup later.
"""

import logging

from datetime import UTC, datetime

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from app.models.embed import CachedEmbed, Provider, make_cache_key


# Configure module logger
logger = logging.getLogger(__name__)


class EmbedCache:
    """
    Async cache of resolved embeds over a Motor collection.

    Rows are immutable once written: there is no update path, only the
    administrative bulk clear removes them.

    Without a collection (database not connected) every lookup is a miss and
    every store fails, so rendering still works without reuse.

    Example usage:
        ```python
        cache = EmbedCache(db_client.get_embed_cache_collection())
        cached = await cache.lookup(Provider.VIMEO, "76979871")
        if cached is None:
            await cache.store(Provider.VIMEO, "76979871", markup, 1.7778)
        ```
    """

    def __init__(self, collection: AsyncIOMotorCollection | None) -> None:
        self._collection = collection

    @property
    def is_connected(self) -> bool:
        return self._collection is not None

    def _require_collection(self) -> AsyncIOMotorCollection:
        if self._collection is None:
            raise ConnectionFailure("Embed cache storage is not connected")
        return self._collection

    async def lookup(self, provider: Provider, video_id: str) -> CachedEmbed | None:
        """
        Read the cached embed for a video.

        Returns:
            CachedEmbed on a hit; None on a miss, a storage error or a corrupt row.
        """
        key = make_cache_key(provider, video_id)
        if not self.is_connected:
            logger.debug(f"Embed cache not connected, treating {key} as miss")
            return None

        try:
            document = await self._collection.find_one({"_id": key})
        except PyMongoError:
            logger.exception(f"Embed cache read failed for {key}, treating as miss")
            return None

        if document is None:
            return None

        try:
            return CachedEmbed.model_validate(document)
        except ValidationError:
            logger.warning(f"Ignoring malformed embed cache document {key}")
            return None

    async def store(
        self,
        provider: Provider,
        video_id: str,
        embed_markup: str,
        aspect_ratio: float,
    ) -> bool:
        """
        Insert a newly resolved embed.

        Callers only store after a confirmed miss. When two requests race on
        the same video the first insert wins and the duplicate is ignored,
        since the markup for a given video does not change.

        Returns:
            True if the embed is now cached, False if the write failed or
            the cache is not connected.
        """
        if not self.is_connected:
            return False

        entry = CachedEmbed(
            _id=make_cache_key(provider, video_id),
            provider=provider,
            video_id=video_id,
            embed_markup=embed_markup,
            aspect_ratio=max(aspect_ratio, 0.0),
            created_at=datetime.now(UTC),
        )
        try:
            await self._collection.insert_one(entry.to_document())
        except DuplicateKeyError:
            logger.info(f"Embed for {entry.id} was cached concurrently, keeping existing row")
            return True
        except PyMongoError:
            logger.exception(f"Embed cache write failed for {entry.id}")
            return False

        logger.debug(f"Cached embed for {entry.id} (aspect ratio {entry.aspect_ratio:.4f})")
        return True

    async def clear(self) -> int:
        """
        Remove every cached embed.

        Returns:
            Number of documents removed.

        Raises:
            PyMongoError: If the database rejects the delete or is not connected.
        """
        result = await self._require_collection().delete_many({})
        logger.info(f"Embed cache cleared, {result.deleted_count} row(s) removed")
        return result.deleted_count

    async def count(self) -> int:
        """
        Number of cached embeds.

        Raises:
            PyMongoError: If the database is unavailable or not connected.
        """
        return await self._require_collection().count_documents({})


__all__ = ["EmbedCache"]

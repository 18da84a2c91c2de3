"""
Embed Cache Test Suite

Exercises EmbedCache against the in-memory collection from conftest and
against AsyncMock collections that raise PyMongo errors.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError, WriteError

from app.models.embed import CachedEmbed, Provider
from app.services.embed_cache import EmbedCache

from conftest import VIMEO_EMBED_HTML, YOUTUBE_EMBED_HTML


def _failing_collection(**errors: Exception) -> MagicMock:
    collection = MagicMock()
    for method, error in errors.items():
        setattr(collection, method, AsyncMock(side_effect=error))
    return collection


@pytest.mark.asyncio
class TestLookup:
    async def test_miss(self, embed_cache: EmbedCache) -> None:
        assert await embed_cache.lookup(Provider.YOUTUBE, "Wl4XiYadV_k") is None

    async def test_hit_after_store(self, embed_cache: EmbedCache) -> None:
        await embed_cache.store(Provider.YOUTUBE, "Wl4XiYadV_k", YOUTUBE_EMBED_HTML, 640 / 360)

        cached = await embed_cache.lookup(Provider.YOUTUBE, "Wl4XiYadV_k")

        assert isinstance(cached, CachedEmbed)
        assert cached.id == "youtube:Wl4XiYadV_k"
        assert cached.provider is Provider.YOUTUBE
        assert cached.embed_markup == YOUTUBE_EMBED_HTML
        assert cached.aspect_ratio == pytest.approx(1.7778, abs=1e-4)

    async def test_keys_are_provider_scoped(self, embed_cache: EmbedCache) -> None:
        await embed_cache.store(Provider.VIMEO, "12345", VIMEO_EMBED_HTML, 1.5)

        assert await embed_cache.lookup(Provider.YOUTUBE, "12345") is None
        assert await embed_cache.lookup(Provider.VIMEO, "12345") is not None

    async def test_read_error_is_a_miss(self) -> None:
        cache = EmbedCache(_failing_collection(find_one=ServerSelectionTimeoutError("down")))

        assert await cache.lookup(Provider.VIMEO, "1") is None

    async def test_malformed_document_is_a_miss(self, embed_collection, embed_cache) -> None:
        embed_collection.documents["vimeo:1"] = {"_id": "vimeo:1", "provider": "vimeo"}

        assert await embed_cache.lookup(Provider.VIMEO, "1") is None


@pytest.mark.asyncio
class TestStore:
    async def test_document_layout(self, embed_collection, embed_cache: EmbedCache) -> None:
        assert await embed_cache.store(Provider.VIMEO, "76979871", VIMEO_EMBED_HTML, 1.5) is True

        document = embed_collection.documents["vimeo:76979871"]
        assert document["provider"] == "vimeo"
        assert document["video_id"] == "76979871"
        assert document["embed_markup"] == VIMEO_EMBED_HTML
        assert document["aspect_ratio"] == 1.5
        assert document["created_at"] is not None

    async def test_unknown_aspect_ratio_is_stored_as_zero(
        self, embed_collection, embed_cache: EmbedCache
    ) -> None:
        await embed_cache.store(Provider.YOUTUBE, "abc", YOUTUBE_EMBED_HTML, 0.0)

        assert embed_collection.documents["youtube:abc"]["aspect_ratio"] == 0.0

    async def test_duplicate_keeps_first_row(self, embed_collection, embed_cache: EmbedCache) -> None:
        await embed_cache.store(Provider.YOUTUBE, "abc", "<iframe>first</iframe>", 1.0)

        assert await embed_cache.store(Provider.YOUTUBE, "abc", "<iframe>second</iframe>", 2.0)

        assert embed_collection.insert_calls == 2
        assert embed_collection.documents["youtube:abc"]["embed_markup"] == "<iframe>first</iframe>"

    async def test_write_error_returns_false(self) -> None:
        cache = EmbedCache(_failing_collection(insert_one=WriteError("disk full")))

        assert await cache.store(Provider.VIMEO, "1", VIMEO_EMBED_HTML, 1.5) is False


@pytest.mark.asyncio
class TestMaintenance:
    async def test_count_and_clear(self, embed_cache: EmbedCache) -> None:
        await embed_cache.store(Provider.YOUTUBE, "a", YOUTUBE_EMBED_HTML, 1.0)
        await embed_cache.store(Provider.VIMEO, "2", VIMEO_EMBED_HTML, 1.0)

        assert await embed_cache.count() == 2
        assert await embed_cache.clear() == 2
        assert await embed_cache.count() == 0

    async def test_clear_propagates_database_errors(self) -> None:
        cache = EmbedCache(_failing_collection(delete_many=ServerSelectionTimeoutError("down")))

        with pytest.raises(ServerSelectionTimeoutError):
            await cache.clear()


@pytest.mark.asyncio
class TestUnconnected:
    """EmbedCache(None) stands in when the database client is not initialized."""

    async def test_lookup_is_a_miss(self) -> None:
        cache = EmbedCache(None)

        assert cache.is_connected is False
        assert await cache.lookup(Provider.VIMEO, "76979871") is None

    async def test_store_fails_softly(self) -> None:
        assert await EmbedCache(None).store(Provider.VIMEO, "1", VIMEO_EMBED_HTML, 1.5) is False

    @pytest.mark.parametrize("operation", ["count", "clear"])
    async def test_maintenance_raises_database_error(self, operation: str) -> None:
        with pytest.raises(PyMongoError):
            await getattr(EmbedCache(None), operation)()

    async def test_error_is_a_connection_failure(self) -> None:
        with pytest.raises(ConnectionFailure, match="not connected"):
            await EmbedCache(None).count()

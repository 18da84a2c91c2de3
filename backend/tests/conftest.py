"""
Pytest Configuration and Test Fixtures for the Video Embed Service

This module provides shared fixtures including:
- Test Settings and ResolverConfig instances
- An in-memory stand-in for the Motor embed_cache collection
- Sample oEmbed replies for YouTube and Vimeo
- Helpers for building mocked requests.Response objects

No fixture touches the network or a real MongoDB server.
"""

import copy
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests
from pymongo.errors import DuplicateKeyError

from app.config import Settings
from app.models.embed import ResolverConfig
from app.services.embed_cache import EmbedCache
from app.services.oembed_client import OEmbedClient


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def mock_settings() -> Settings:
    """Settings with test values and no .env influence on the embed options."""
    return Settings(
        _env_file=None,
        app_env="testing",
        mongodb_uri="mongodb://localhost:27017",
        mongodb_db_name="video_embeds_test",
        site_scheme="http",
        embed_max_width=640,
        embed_max_height=480,
        embed_responsive=False,
        admin_token="test-admin-token",
    )


@pytest.fixture
def resolver_config() -> ResolverConfig:
    return ResolverConfig(max_width=640, max_height=480, responsive=False, scheme="http")


@pytest.fixture
def https_config() -> ResolverConfig:
    return ResolverConfig(max_width=640, max_height=480, responsive=False, scheme="https")


# ==============================================================================
# In-memory Mongo collection
# ==============================================================================


class InMemoryCollection:
    """
    Minimal async stand-in for the Motor collection operations EmbedCache uses.

    Mirrors MongoDB's unique _id behaviour by raising DuplicateKeyError.
    """

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.insert_calls = 0

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        document = self.documents.get(query["_id"])
        return copy.deepcopy(document) if document is not None else None

    async def insert_one(self, document: dict[str, Any]) -> MagicMock:
        self.insert_calls += 1
        if document["_id"] in self.documents:
            raise DuplicateKeyError(f"E11000 duplicate key error: {document['_id']}")
        self.documents[document["_id"]] = copy.deepcopy(document)
        return MagicMock(inserted_id=document["_id"])

    async def delete_many(self, query: dict[str, Any]) -> MagicMock:
        removed = len(self.documents)
        self.documents.clear()
        return MagicMock(deleted_count=removed)

    async def count_documents(self, query: dict[str, Any]) -> int:
        return len(self.documents)


@pytest.fixture
def embed_collection() -> InMemoryCollection:
    return InMemoryCollection()


@pytest.fixture
def embed_cache(embed_collection: InMemoryCollection) -> EmbedCache:
    return EmbedCache(embed_collection)


# ==============================================================================
# oEmbed fixtures
# ==============================================================================

YOUTUBE_EMBED_HTML = (
    '<iframe width="640" height="360" '
    'src="http://www.youtube.com/embed/Wl4XiYadV_k?feature=oembed" '
    'frameborder="0" allowfullscreen></iframe>'
)

VIMEO_EMBED_HTML = (
    '<iframe src="https://player.vimeo.com/video/76979871?app_id=122963" '
    'width="640" height="360" frameborder="0" allowfullscreen></iframe>'
)


@pytest.fixture
def youtube_oembed_payload() -> dict[str, Any]:
    return {
        "type": "video",
        "version": "1.0",
        "provider_name": "YouTube",
        "title": "Sample video",
        "width": 640,
        "height": 360,
        "html": YOUTUBE_EMBED_HTML,
    }


@pytest.fixture
def vimeo_oembed_payload() -> dict[str, Any]:
    return {
        "type": "video",
        "version": "1.0",
        "provider_name": "Vimeo",
        "width": 640,
        "height": 360,
        "html": VIMEO_EMBED_HTML,
    }


def make_response(payload: Any = None, status_code: int = 200, text: str | None = None) -> MagicMock:
    """Build a mocked requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error"
        )
    else:
        response.raise_for_status.return_value = None
    if text is not None:
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", text, 0)
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def oembed_client() -> OEmbedClient:
    return OEmbedClient(request_timeout=5)


@pytest.fixture
def response_factory():
    return make_response

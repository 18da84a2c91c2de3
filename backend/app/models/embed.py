"""
Embed Pydantic models for video link recognition, oEmbed replies and the cache.

This module defines:
- Provider: the two supported video services
- VideoReference: one recognized link inside a text block (transient)
- OEmbedResponse: the usable part of a provider's oEmbed JSON reply (transient)
- CachedEmbed: a durable embed_cache document
- ResolverConfig: the immutable options for one resolution run
"""

import html
from datetime import UTC, datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """Supported video providers."""

    YOUTUBE = "youtube"
    VIMEO = "vimeo"


def make_cache_key(provider: Provider, video_id: str) -> str:
    """Build the provider-scoped primary key of an embed_cache document."""
    return f"{provider.value}:{video_id}"


class VideoReference(BaseModel):
    """
    A provider link found inside a paragraph of user text.

    Attributes:
        provider: Service the link points at
        video_id: Provider-scoped video identifier
        source_url: The link itself, without any trailing query string
        raw_matched_text: Exact span of the text that gets replaced
        extra_query: Trailing query string as written, e.g. "&t=30s" or "&amp;t=30s"
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    video_id: str = Field(..., min_length=1)
    source_url: str
    raw_matched_text: str
    extra_query: str = ""

    @property
    def cache_key(self) -> str:
        return make_cache_key(self.provider, self.video_id)

    @property
    def playback_query(self) -> str:
        """
        Extra query ready to be merged into an iframe URL.

        HTML entities are unescaped and leading ampersands dropped, so
        "&amp;t=30s" becomes "t=30s".
        """
        return html.unescape(self.extra_query).lstrip("&")


class OEmbedResponse(BaseModel):
    """Usable fields of a provider's oEmbed reply."""

    html: str = Field(..., min_length=1)
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def aspect_ratio(self) -> float:
        """width / height, or 0.0 when either dimension is missing."""
        if self.width and self.height:
            return self.width / self.height
        return 0.0


class CachedEmbed(BaseModel):
    """
    Embed markup previously resolved for one video.

    Documents are written once, on a cache miss, and never updated in place.
    An aspect_ratio of 0.0 means the provider did not report dimensions.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Provider-scoped key, e.g. 'vimeo:76979871'")
    provider: Provider
    video_id: str
    embed_markup: str
    aspect_ratio: float = Field(default=0.0, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_document(self) -> dict:
        document = self.model_dump(by_alias=True)
        document["provider"] = self.provider.value
        return document


class ResolverConfig(BaseModel):
    """Options for one resolution run. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    max_width: int = Field(default=640, ge=1)
    max_height: int = Field(default=480, ge=1)
    responsive: bool = False
    default_aspect_ratio: float = Field(default=16 / 9, gt=0)
    scheme: Literal["http", "https"] = "http"


__all__ = [
    "CachedEmbed",
    "OEmbedResponse",
    "Provider",
    "ResolverConfig",
    "VideoReference",
    "make_cache_key",
]

"""
Embeds API Router Module.

Endpoints:
    - POST /render: Replace stand-alone video links in text with embed markup
    - GET /cache: Number of cached embeds (admin)
    - DELETE /cache: Remove every cached embed (admin)

Example:
    >>> # Request
    >>> POST /api/v1/embeds/render
    >>> {"text": "<p>https://vimeo.com/76979871</p>"}
    >>>
    >>> # Response
    >>> {"text": "<iframe src=\\"https://player.vimeo.com/video/76979871\\" ...></iframe>",
    >>>  "embeds": 1}
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from pymongo.errors import PyMongoError

from app.config import Settings, get_settings
from app.core.auth import require_admin
from app.core.database import get_db_client
from app.services.embed_cache import EmbedCache
from app.services.embed_resolver import EmbedResolver
from app.services.oembed_client import OEmbedClient


# Configure module logger for structured logging
logger = logging.getLogger(__name__)


# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["embeds"],
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "description": "Embed cache storage unavailable",
        },
    },
)


# =============================================================================
# Request/Response Models
# =============================================================================


class RenderRequest(BaseModel):
    """Text to scan for stand-alone video links."""

    text: str = Field(
        ...,
        description="Paragraph-oriented markup, e.g. '<p>https://youtu.be/Wl4XiYadV_k</p>'",
    )


class RenderResponse(BaseModel):
    text: str = Field(..., description="Input text with resolvable links replaced by embeds")
    embeds: int = Field(..., ge=0, description="Number of links replaced")


class CacheCountResponse(BaseModel):
    count: int = Field(..., ge=0)


class CacheClearResponse(BaseModel):
    removed: int = Field(..., ge=0)


# =============================================================================
# Dependencies
# =============================================================================


def get_embed_cache() -> EmbedCache:
    """
    Embed cache over the application's MongoDB connection.

    When the database client was never initialized the cache is returned
    unconnected: rendering proceeds without reuse and the admin endpoints
    answer 503.
    """
    try:
        collection = get_db_client().get_embed_cache_collection()
    except RuntimeError as e:
        logger.warning(f"Embed cache unavailable, rendering without cache: {e}")
        return EmbedCache(None)
    return EmbedCache(collection)


def get_oembed_client(settings: Settings = Depends(get_settings)) -> OEmbedClient:
    return OEmbedClient(request_timeout=settings.oembed_request_timeout)


def get_embed_resolver(
    settings: Settings = Depends(get_settings),
    cache: EmbedCache = Depends(get_embed_cache),
    client: OEmbedClient = Depends(get_oembed_client),
) -> EmbedResolver:
    return EmbedResolver(cache=cache, client=client, config=settings.resolver_config())


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/render", response_model=RenderResponse)
async def render_embeds(
    request: RenderRequest,
    resolver: EmbedResolver = Depends(get_embed_resolver),
) -> RenderResponse:
    """
    Replace stand-alone YouTube and Vimeo paragraphs with embed markup.

    Links whose oEmbed lookup fails are left exactly as written.
    """
    result = await resolver.resolve_with_stats(request.text)
    return RenderResponse(text=result.text, embeds=result.embeds)


@router.get("/cache", response_model=CacheCountResponse, dependencies=[Depends(require_admin)])
async def count_cached_embeds(cache: EmbedCache = Depends(get_embed_cache)) -> CacheCountResponse:
    """Report how many embeds are cached."""
    try:
        count = await cache.count()
    except PyMongoError as e:
        logger.exception("Failed to count cached embeds")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Embed cache storage unavailable",
        ) from e
    return CacheCountResponse(count=count)


@router.delete("/cache", response_model=CacheClearResponse, dependencies=[Depends(require_admin)])
async def clear_cached_embeds(cache: EmbedCache = Depends(get_embed_cache)) -> CacheClearResponse:
    """Drop every cached embed; later renders fetch from the providers again."""
    try:
        removed = await cache.clear()
    except PyMongoError as e:
        logger.exception("Failed to clear embed cache")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Embed cache storage unavailable",
        ) from e
    return CacheClearResponse(removed=removed)

"""
Models Package for the video embed service.

Pydantic models shared by the recognizer, the oEmbed client, the embed
cache and the resolver. CachedEmbed is MongoDB-compatible through its
_id alias.

Example Usage:
    ```python
    from app.models import Provider, ResolverConfig, VideoReference

    config = ResolverConfig(max_width=800, responsive=True)
    ```
"""

from app.models.embed import (
    CachedEmbed,
    OEmbedResponse,
    Provider,
    ResolverConfig,
    VideoReference,
    make_cache_key,
)


__all__ = [
    "CachedEmbed",
    "OEmbedResponse",
    "Provider",
    "ResolverConfig",
    "VideoReference",
    "make_cache_key",
]

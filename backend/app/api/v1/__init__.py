"""
API v1 Router Aggregator.

Combines all v1 endpoint routers into a single APIRouter for registration
with the main FastAPI application under the /api/v1 prefix.

Router Structure:
    - /embeds: Embed rendering and cache maintenance endpoints
"""

import logging

from fastapi import APIRouter

from app.api.v1.embeds import router as embeds_router


# Configure logger
logger = logging.getLogger(__name__)

# Create the main API v1 router
api_router = APIRouter()

api_router.include_router(
    embeds_router,
    prefix="/embeds",
    tags=["embeds"],
)
logger.debug("Loaded embeds router")


__all__ = ["api_router"]

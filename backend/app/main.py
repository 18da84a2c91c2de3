"""
Video Embed Service API - FastAPI Application Entry Point.

Initializes the FastAPI application with CORS middleware, registers the v1
API router, and configures startup/shutdown handlers for logging and the
MongoDB-backed embed cache.

Architecture Decisions:
- CORS middleware configured for frontend access at configured origins
- Startup/shutdown event handlers for graceful connection management
- Health check endpoint for container orchestration monitoring
- All API endpoints versioned under /api/v1 prefix
"""

import logging

from datetime import UTC, datetime

import uvicorn

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api.v1 import api_router
from app.config import get_settings
from app.core.database import close_db, init_db
from app.utils.logger import setup_logging


logger = logging.getLogger(__name__)

# =============================================================================
# Configuration Loading
# =============================================================================

settings = get_settings()


# =============================================================================
# FastAPI Application Initialization
# =============================================================================

app = FastAPI(
    title="Video Embed Service API",
    version=__version__,
    description="Replaces stand-alone YouTube and Vimeo links with cached oEmbed players",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Startup / Shutdown
# =============================================================================


@app.on_event("startup")
async def startup_event() -> None:
    """
    Configure logging, connect to MongoDB and apply pending cache migrations.

    A database failure is logged but does not stop the application, so the
    health endpoint stays reachable; embed endpoints answer 503 until the
    database is available.
    """
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)

    try:
        await init_db(settings)
    except Exception:
        logger.exception("Failed to initialize embed cache database")

    logger.info(
        f"{settings.app_name} started on {settings.host}:{settings.port} "
        f"(scheme={settings.site_scheme}, responsive={settings.embed_responsive})"
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Close the MongoDB connection pool."""
    await close_db()
    logger.info(f"{settings.app_name} shutdown complete")


# =============================================================================
# Root and Health Endpoints
# =============================================================================


@app.get("/", tags=["root"])
async def root() -> dict:
    """API information and navigation."""
    return {
        "name": "Video Embed Service API",
        "version": __version__,
        "description": "Replaces stand-alone YouTube and Vimeo links with cached oEmbed players",
        "docs": "/docs",
    }


@app.get("/health", tags=["health"])
async def health_check() -> dict:
    """
    Liveness probe for container orchestration.

    Returns immediately without checking MongoDB.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": settings.app_name,
    }


# =============================================================================
# API Router Registration
# =============================================================================

app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level,
    )

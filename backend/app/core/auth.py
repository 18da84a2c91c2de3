"""
Admin Authentication Module

Guards the cache maintenance endpoints with a static bearer token taken
from the admin_token setting. When no token is configured the endpoints are
disabled and answer 503.

Usage:
    ```python
    from fastapi import Depends
    from app.core.auth import require_admin

    @router.delete("/cache", dependencies=[Depends(require_admin)])
    async def clear_cache():
        ...
    ```
"""

import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import Settings, get_settings


# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Security Scheme
# =============================================================================

# auto_error=False so a missing header yields our own 401 with WWW-Authenticate
security = HTTPBearer(
    scheme_name="Bearer",
    description="Admin bearer token configured through ADMIN_TOKEN.",
    auto_error=False,
)


# =============================================================================
# Authentication Dependencies
# =============================================================================


async def require_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Require the configured admin bearer token.

    Raises:
        HTTPException: 503 if no admin token is configured, 401 if the token
            is missing or does not match.
    """
    if not settings.is_admin_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin endpoints are disabled",
        )

    if credentials is None or not secrets.compare_digest(
        credentials.credentials.encode("utf-8"), settings.admin_token.encode("utf-8")
    ):
        logger.warning("Rejected admin request with missing or invalid token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

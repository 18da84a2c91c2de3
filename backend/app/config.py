"""
Video Embed Service Configuration Management Module

This module provides configuration management for the video embed service
using Pydantic Settings. It loads and validates all environment variables
required for:
- Application settings (name, environment, debug mode, logging)
- MongoDB connection for the durable embed cache
- The host environment's URL scheme
- Embed rendering options (maximum size, responsive wrapping, aspect ratio)
- Admin access to cache maintenance endpoints

All settings support environment variable overrides and .env file loading.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.embed import ResolverConfig


class Settings(BaseSettings):
    """
    Configuration settings for the video embed service.

    Configuration Categories:
    - Application: Core app settings like name, environment, debug mode
    - MongoDB: Database connection URI and connection pool settings
    - Embeds: oEmbed request sizing, responsive wrapping and scheme
    - Admin: Bearer token guarding the cache maintenance endpoints

    Example usage:
        ```python
        from app.config import Settings

        settings = Settings()
        config = settings.resolver_config()
        print(f"Embeds limited to {config.max_width}x{config.max_height}")
        ```
    """

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(
        default="video-embed-service",
        description="Application name displayed in API documentation and logs",
    )

    app_env: str = Field(
        default="development",
        description="Application environment (development, staging, production, testing)",
    )

    debug: bool = Field(default=False, description="Enable uvicorn hot-reload")

    log_level: str = Field(
        default="info", description="Logging level (debug, info, warning, error, critical)"
    )

    json_logs: bool = Field(
        default=True, description="Emit JSON log records instead of plain text"
    )

    host: str = Field(default="0.0.0.0", description="Host address for the API server to bind to")

    port: int = Field(default=8000, description="Port number for the API server", ge=1, le=65535)

    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="List of allowed CORS origins for frontend access",
    )

    # =========================================================================
    # MongoDB Configuration
    # =========================================================================

    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI (e.g., mongodb://localhost:27017)",
    )

    mongodb_db_name: str = Field(
        default="video_embeds", description="MongoDB database holding the embed cache"
    )

    mongodb_min_pool_size: int = Field(
        default=1, description="Minimum number of connections in MongoDB connection pool", ge=0
    )

    mongodb_max_pool_size: int = Field(
        default=50, description="Maximum number of connections in MongoDB connection pool", ge=1
    )

    # =========================================================================
    # Embed Settings
    # =========================================================================

    site_scheme: str = Field(
        default="http",
        description="Scheme the host site is served over; selects the oEmbed request "
        "scheme and enables http:// to https:// rewriting of embed markup",
    )

    embed_max_width: int = Field(
        default=640, description="maxwidth passed to the oEmbed providers", ge=1
    )

    embed_max_height: int = Field(
        default=480, description="maxheight passed to the oEmbed providers", ge=1
    )

    embed_responsive: bool = Field(
        default=False, description="Wrap embeds in a fluid aspect-ratio container"
    )

    embed_default_aspect_ratio: float = Field(
        default=16 / 9,
        description="Aspect ratio used when a cached embed has none recorded",
        gt=0,
    )

    oembed_request_timeout: float = Field(
        default=10.0, description="Timeout in seconds for a single oEmbed request", gt=0
    )

    # =========================================================================
    # Admin Settings
    # =========================================================================

    admin_token: str | None = Field(
        default=None,
        description="Bearer token required by the cache maintenance endpoints. "
        "When unset those endpoints are disabled.",
    )

    # =========================================================================
    # Model Configuration
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid logging level."""
        valid_levels = {"debug", "info", "warning", "error", "critical"}
        normalized = v.lower()
        if normalized not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {', '.join(valid_levels)}")
        return normalized

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate that app_env is a valid environment name."""
        valid_envs = {"development", "staging", "production", "testing"}
        normalized = v.lower()
        if normalized not in valid_envs:
            raise ValueError(f"Invalid app_env '{v}'. Must be one of: {', '.join(valid_envs)}")
        return normalized

    @field_validator("site_scheme")
    @classmethod
    def validate_site_scheme(cls, v: str) -> str:
        """Only http and https are meaningful for the host site."""
        normalized = v.lower().strip()
        if normalized not in {"http", "https"}:
            raise ValueError(f"Invalid site_scheme '{v}'. Must be 'http' or 'https'")
        return normalized

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string if provided as string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def is_https(self) -> bool:
        """Check if the host site is served over https."""
        return self.site_scheme == "https"

    @property
    def is_admin_enabled(self) -> bool:
        """Check if an admin token is configured for cache maintenance."""
        return self.admin_token is not None and len(self.admin_token) > 0

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    def resolver_config(self) -> ResolverConfig:
        """
        Build the immutable configuration for one resolution run.

        Returns:
            ResolverConfig: Snapshot of the embed options and site scheme.
        """
        return ResolverConfig(
            max_width=self.embed_max_width,
            max_height=self.embed_max_height,
            responsive=self.embed_responsive,
            default_aspect_ratio=self.embed_default_aspect_ratio,
            scheme=self.site_scheme,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    The @lru_cache decorator ensures that the Settings object is created only
    once on first call, and subsequent calls return the cached instance without
    re-reading environment variables or .env files.

    Returns:
        Settings: The global configuration instance.
    """
    return Settings()

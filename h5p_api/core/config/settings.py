# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the
H5P Content Bank API. Settings are loaded from environment variables
with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from h5p_api.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.h5p.repository_backend)
    'memory'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Content bank database configuration.

    Only used when the repository backend is "database".

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        create_schema: Create tables and seed the system scope at startup.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    user: str = "h5p"
    password: SecretStr = SecretStr("h5p_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "h5p_contentbank"
    pool_size: int = 10
    max_overflow: int = 20
    create_schema: bool = True

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for the upload staging area.

    Staged blobs are isolated per principal via key prefix:
    principal:{principal_id}:*

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr = SecretStr("")
    database: int = 0
    max_connections: int = 20

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        pwd = self.password.get_secret_value()
        if pwd:
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class APISettings(BaseSettings):
    """API server and caller configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        api_key: Shared key callers must send in X-API-Key. Empty disables the check.
        public_base_url: Base URL used to build public file and embed URLs.
        admin_principals: Comma-separated principal ids that hold every capability.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    api_key: SecretStr = SecretStr("")
    public_base_url: str = "http://localhost:8000"
    admin_principals: str = ""

    @property
    def admin_principal_list(self) -> list[str]:
        """Parse admin principals string into a list."""
        return [p.strip() for p in self.admin_principals.split(",") if p.strip()]

    @property
    def base_url(self) -> str:
        """Public base URL without a trailing slash."""
        return self.public_base_url.rstrip("/")


class H5PSettings(BaseSettings):
    """H5P content bank behaviour.

    Attributes:
        repository_backend: Where content items live (memory or database).
        staging_backend: Where uploads are staged during ingestion (memory or redis).
        staging_ttl_seconds: Expiry for staged blobs left behind by crashed requests.
        enabled_content_kinds: Comma-separated content kinds enabled by default.
        iframe_width: Width attribute of generated iframe markup.
        iframe_height: Height attribute of generated iframe markup.
    """

    model_config = SettingsConfigDict(
        env_prefix="H5P_",
        extra="ignore",
    )

    repository_backend: Literal["memory", "database"] = "memory"
    staging_backend: Literal["memory", "redis"] = "memory"
    staging_ttl_seconds: int = 60 * 60
    enabled_content_kinds: str = "h5p"
    iframe_width: str = "100%"
    iframe_height: str = "600"

    @property
    def enabled_kinds_list(self) -> list[str]:
        """Parse enabled content kinds into a list of lowercase tags."""
        return [k.strip().lower() for k in self.enabled_content_kinds.split(",") if k.strip()]


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        api: API server settings.
        database: Database settings.
        redis: Redis settings.
        h5p: Content bank settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Subsettings - loaded with their own env prefixes
    api: APISettings = Field(default_factory=APISettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    h5p: H5PSettings = Field(default_factory=H5PSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production without an API key or
                with in-memory storage.
        """
        if self.environment == "production":
            if not self.api.api_key.get_secret_value():
                raise ValueError(
                    "API key must be set in production. "
                    "Set API_API_KEY environment variable."
                )
            if self.h5p.repository_backend == "memory":
                raise ValueError(
                    "In-memory repository cannot be used in production. "
                    "Set H5P_REPOSITORY_BACKEND=database."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module wires the content service from settings and provides
dependency functions for endpoints:
- Build and tear down the repository, staging area and service
- Assert the calling principal from request headers
- Get the content service instance

Example:
    @router.get("/list")
    async def list_content(
        context: RequestContext = Depends(require_principal),
        service: H5PContentService = Depends(get_content_service),
    ):
        ...
"""

import hmac
import logging

from fastapi import FastAPI, HTTPException, Request, status

from h5p_api.core.config import Settings, get_settings
from h5p_api.infrastructure.authorization import CapabilityGate
from h5p_api.infrastructure.cache import close_redis, get_redis, init_redis
from h5p_api.infrastructure.database import (
    SqlContentRepository,
    close_database,
    init_database,
)
from h5p_api.infrastructure.memory import InMemoryContentRepository
from h5p_api.services.h5p import (
    ContentKind,
    ContentTypeRegistry,
    H5PContentService,
    H5PContentTypeHandler,
    RequestContext,
    StagingArea,
)
from h5p_api.services.h5p.protocols import ContentRepositoryProtocol
from h5p_api.utils.logging import bind_context

logger = logging.getLogger(__name__)

# Header names
API_KEY_HEADER = "X-API-Key"
USER_ID_HEADER = "X-User-Id"


def build_content_service(
    settings: Settings,
    repository: ContentRepositoryProtocol,
    staging: StagingArea,
) -> H5PContentService:
    """Assemble the content service from its collaborators.

    Args:
        settings: Application settings.
        repository: Content repository.
        staging: Upload staging area.

    Returns:
        Configured H5PContentService.
    """
    known_kinds = {kind.value for kind in ContentKind}
    unknown = [kind for kind in settings.h5p.enabled_kinds_list if kind not in known_kinds]
    if unknown:
        logger.warning("Ignoring unknown content kinds in configuration: %s", unknown)

    registry = ContentTypeRegistry(
        repository,
        enabled_kinds=[k for k in settings.h5p.enabled_kinds_list if k in known_kinds],
    )
    registry.register(H5PContentTypeHandler(repository, staging))

    return H5PContentService(
        repository=repository,
        staging=staging,
        registry=registry,
        gate=CapabilityGate(repository, settings.api.admin_principal_list),
        iframe_width=settings.h5p.iframe_width,
        iframe_height=settings.h5p.iframe_height,
    )


async def init_services(app: FastAPI, settings: Settings) -> None:
    """Initialize backends and attach the content service to app.state.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.

    Raises:
        DatabaseError: If the database backend cannot be initialized.
        RedisError: If the Redis backend cannot be initialized.
    """
    if settings.h5p.repository_backend == "database":
        await init_database(settings)
        repository: ContentRepositoryProtocol = SqlContentRepository()
        logger.info("Using database content repository")
    else:
        repository = InMemoryContentRepository()
        logger.info("Using in-memory content repository")

    redis_client = None
    if settings.h5p.staging_backend == "redis":
        await init_redis(settings)
        redis_client = get_redis()
        logger.info("Using Redis staging area")

    staging = StagingArea(redis_client, expire_seconds=settings.h5p.staging_ttl_seconds)

    app.state.repository = repository
    app.state.content_service = build_content_service(settings, repository, staging)


async def close_services(app: FastAPI, settings: Settings) -> None:
    """Close backends opened by init_services."""
    if settings.h5p.staging_backend == "redis":
        await close_redis()
    if settings.h5p.repository_backend == "database":
        await close_database()
    app.state.content_service = None


def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_content_service(request: Request) -> H5PContentService:
    """Get the content service.

    Raises:
        HTTPException: If the service has not been initialized.
    """
    service = getattr(request.app.state, "content_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Content service not initialized",
        )
    return service


def require_principal(request: Request) -> RequestContext:
    """Require an asserted principal.

    The caller asserts the acting principal in X-User-Id. When an API key
    is configured, X-API-Key must match it.

    Args:
        request: HTTP request.

    Returns:
        RequestContext for the acting principal.

    Raises:
        HTTPException: If the API key is missing or wrong, or no principal
            is asserted.
    """
    settings = get_app_settings(request)

    expected_key = settings.api.api_key.get_secret_value()
    if expected_key:
        provided_key = request.headers.get(API_KEY_HEADER, "")
        if not hmac.compare_digest(provided_key.encode(), expected_key.encode()):
            logger.debug("Rejected request with invalid API key")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing API key",
            )

    principal_id = request.headers.get(USER_ID_HEADER, "").strip()
    if not principal_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Principal required. Provide the {USER_ID_HEADER} header.",
        )

    bind_context(principal_id=principal_id)
    return RequestContext(principal_id=principal_id, base_url=settings.api.base_url)

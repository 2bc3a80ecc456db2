# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the H5P Content
Bank API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from h5p_api import __version__
from h5p_api.api.dependencies import close_services, init_services
from h5p_api.api.middleware import RequestContextMiddleware
from h5p_api.api.routes import health, pluginfile
from h5p_api.api.v1 import router as v1_router
from h5p_api.api.v1.schemas import ErrorBody, ErrorResponse
from h5p_api.core.config import Settings, get_settings
from h5p_api.services.h5p.exceptions import ErrorKind, H5PError
from h5p_api.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# HTTP status for each error kind
ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_PAYLOAD: status.HTTP_400_BAD_REQUEST,
    ErrorKind.SCOPE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONTENT_TYPE_UNAVAILABLE: status.HTTP_409_CONFLICT,
    ErrorKind.INGESTION_FAILED: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.CONTENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.AUTHORIZATION_DENIED: status.HTTP_403_FORBIDDEN,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes the repository, staging area and content service on
    startup and closes their backends on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info(
        "Starting H5P Content Bank API: environment=%s, repository=%s, staging=%s",
        settings.environment,
        settings.h5p.repository_backend,
        settings.h5p.staging_backend,
    )

    await init_services(app, settings)

    yield

    try:
        await close_services(app, settings)
    except Exception as e:
        logger.warning("Error closing backends: %s", str(e))

    logger.info("Shutting down H5P Content Bank API")


async def h5p_error_handler(request: Request, exc: H5PError) -> JSONResponse:
    """Render a content bank error as a structured failure."""
    status_code = ERROR_STATUS_CODES.get(exc.kind, status.HTTP_400_BAD_REQUEST)

    if status_code >= 422:
        logger.warning("Request failed: kind=%s, message=%s", exc.kind.value, exc.message)
    else:
        logger.info("Request rejected: kind=%s, message=%s", exc.kind.value, exc.message)

    body = ErrorResponse(
        error=ErrorBody(kind=exc.kind.value, message=exc.message, details=exc.details),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors as an invalid_payload failure.

    Covers missing or mistyped body fields, query parameters and path
    parameters, which never reach the content service.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    message = "; ".join(f"{e['field']}: {e['message']}" for e in errors) or "Invalid request"
    logger.info("Request rejected: kind=%s, message=%s", ErrorKind.INVALID_PAYLOAD.value, message)

    body = ErrorResponse(
        error=ErrorBody(
            kind=ErrorKind.INVALID_PAYLOAD.value,
            message=message,
            details={"errors": errors},
        ),
    )
    return JSONResponse(
        status_code=ERROR_STATUS_CODES[ErrorKind.INVALID_PAYLOAD],
        content=body.model_dump(),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="H5P Content Bank API",
        description="Upload, list and embed H5P content in a scoped content bank",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.settings = settings
    app.state.content_service = None

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(H5PError, h5p_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # =========================================================================
    # Middleware
    # =========================================================================
    app.add_middleware(RequestContextMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(pluginfile.router, tags=["Public Files"])
    app.include_router(v1_router)

    return app

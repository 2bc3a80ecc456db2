# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""H5P content bank API endpoints.

This module exposes the remote-callable functions:
- POST /upload - Upload an H5P package (local_h5p_api_upload)
- GET /list - List H5P content of a scope (local_h5p_api_list)
- GET /embed/{content_id} - Get embed code of an item (local_h5p_api_get_embed)
- GET /functions - Describe the available functions

Every endpoint requires an asserted principal (X-User-Id). Content bank
errors are rendered by the application's H5PError handler.
"""

import logging

from fastapi import APIRouter, Depends, Query

from h5p_api.api.dependencies import get_content_service, require_principal
from h5p_api.api.v1.schemas import (
    EmbedResponse,
    ErrorResponse,
    FunctionsResponse,
    ListResponse,
    UploadRequest,
    UploadResponse,
)
from h5p_api.services.h5p import H5PContentService, RequestContext

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@router.post("/upload", response_model=UploadResponse, responses=_ERROR_RESPONSES)
async def upload_content(
    request: UploadRequest,
    context: RequestContext = Depends(require_principal),
    service: H5PContentService = Depends(get_content_service),
) -> UploadResponse:
    """Upload H5P content to the content bank.

    Args:
        request: Base64 payload, filename, title and target scope.
        context: Acting principal.
        service: Content service.

    Returns:
        UploadResponse with the new item's id and embed code.
    """
    result = await service.upload(
        context,
        payload_base64=request.payload_base64,
        filename=request.filename,
        title=request.title,
        scope_id=request.scope_id,
        collection_id=request.collection_id,
    )
    return UploadResponse.from_result(result)


@router.get("/list", response_model=ListResponse, responses=_ERROR_RESPONSES)
async def list_content(
    scope_id: int = Query(default=0, ge=0, description="Scope id (0 = not given)"),
    collection_id: int = Query(default=0, ge=0, description="Collection id (0 = not given)"),
    context: RequestContext = Depends(require_principal),
    service: H5PContentService = Depends(get_content_service),
) -> ListResponse:
    """List H5P content in the content bank."""
    result = await service.list(context, scope_id=scope_id, collection_id=collection_id)
    return ListResponse.from_result(result)


@router.get("/embed/{content_id}", response_model=EmbedResponse, responses=_ERROR_RESPONSES)
async def get_embed(
    content_id: int,
    context: RequestContext = Depends(require_principal),
    service: H5PContentService = Depends(get_content_service),
) -> EmbedResponse:
    """Get embed code for H5P content."""
    result = await service.get_embed(context, content_id)
    return EmbedResponse.from_result(result)


@router.get("/functions", response_model=FunctionsResponse)
async def list_functions(
    context: RequestContext = Depends(require_principal),
    service: H5PContentService = Depends(get_content_service),
) -> FunctionsResponse:
    """Describe the remote-callable functions and content types."""
    return FunctionsResponse(**service.describe_functions())

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Public file delivery.

Serves the binaries that embed URLs point at. The path mirrors the public
file URL built by h5p_api.services.h5p.embed.public_file_url. No principal
is required: anyone holding the URL may fetch the package.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from h5p_api.api.dependencies import get_content_service
from h5p_api.services.h5p import H5PContentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pluginfile/{scope_id}/contentbank/public/{content_id}/{filename}")
async def get_public_file(
    scope_id: int,
    content_id: int,
    filename: str,
    service: H5PContentService = Depends(get_content_service),
) -> Response:
    """Return the stored package of a content item."""
    stored, mime_type = await service.get_public_file(scope_id, content_id, filename)

    logger.debug("Serving public file: content=%s, size=%s", content_id, stored.size)
    return Response(
        content=stored.data,
        media_type=mime_type,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(stored.filename)}"},
    )

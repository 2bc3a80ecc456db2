# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Upload ingestion.

Turns a base64 upload into a content bank item:

1. Decode the payload and sanitize the filename (validate_upload).
2. Resolve the enabled handler for the content kind in the target scope.
3. Stage the bytes under (principal, random token).
4. Let the handler ingest the staged blob into a new content item.
5. Apply the requested title. A failed rename is logged, not raised.
6. Release the staged blob on every path.
7. Compute the embed descriptor of the new item.
"""

import base64
import binascii
import logging
from pathlib import PurePosixPath

from h5p_api.services.h5p.embed import EmbedResolver
from h5p_api.services.h5p.exceptions import (
    IngestionFailedError,
    InvalidPayloadError,
)
from h5p_api.services.h5p.handlers.base import BaseContentTypeHandler
from h5p_api.services.h5p.handlers.registry import ContentTypeRegistry
from h5p_api.services.h5p.models import (
    ContentItem,
    ContentKind,
    RequestContext,
    Scope,
    StagedBlob,
    UploadRequest,
    UploadResult,
)
from h5p_api.services.h5p.protocols import (
    ContentRepositoryProtocol,
    StagingAreaProtocol,
)

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "content.h5p"


def decode_payload(payload_base64: str) -> bytes:
    """Strictly decode a base64 payload.

    Args:
        payload_base64: Transport-encoded payload.

    Returns:
        Decoded, non-empty bytes.

    Raises:
        InvalidPayloadError: If the payload is empty, is not valid base64,
            or decodes to nothing.
    """
    if not payload_base64 or not payload_base64.strip():
        raise InvalidPayloadError("Payload is empty", field="payload_base64")

    # Line breaks are common in wrapped base64 output
    compact = "".join(payload_base64.split())
    try:
        data = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidPayloadError(
            "Invalid base64 encoded data",
            field="payload_base64",
        ) from e

    if not data:
        raise InvalidPayloadError("Payload decodes to no data", field="payload_base64")
    return data


def sanitize_filename(filename: str) -> str:
    """Validate that a filename is a single well-formed path segment.

    Args:
        filename: Requested filename.

    Returns:
        The filename with surrounding whitespace removed.

    Raises:
        InvalidPayloadError: If the filename is empty, a relative path
            marker, contains a path separator or control characters.
    """
    name = (filename or "").strip()
    if not name:
        raise InvalidPayloadError("Filename is empty", field="filename")

    if name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidPayloadError(
            "Filename must be a single path segment",
            field="filename",
            details={"filename": name},
        )

    if any(ord(ch) < 32 or ord(ch) == 127 for ch in name):
        raise InvalidPayloadError("Filename contains control characters", field="filename")

    return name


def validate_upload(payload_base64: str, filename: str, title: str = "") -> UploadRequest:
    """Validate raw upload parameters.

    Args:
        payload_base64: Transport-encoded payload.
        filename: Requested filename.
        title: Requested display name. Empty derives it from the filename.

    Returns:
        Validated upload request.

    Raises:
        InvalidPayloadError: If the payload or filename is not acceptable.
    """
    name = sanitize_filename(filename)
    data = decode_payload(payload_base64)
    title = (title or "").strip() or PurePosixPath(name).stem or name
    return UploadRequest(data=data, filename=name, title=title)


class Uploader:
    """Ingests validated uploads into the content bank."""

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        staging: StagingAreaProtocol,
        registry: ContentTypeRegistry,
        embed_resolver: EmbedResolver,
        content_kind: ContentKind = ContentKind.H5P,
    ) -> None:
        """Initialize the uploader.

        Args:
            repository: Content repository used for renames.
            staging: Staging area uploads pass through.
            registry: Content-type handler registry.
            embed_resolver: Computes the embed descriptor of new items.
            content_kind: Content kind uploads are ingested as.
        """
        self._repository = repository
        self._staging = staging
        self._registry = registry
        self._embed_resolver = embed_resolver
        self._content_kind = content_kind

    async def upload(
        self,
        context: RequestContext,
        request: UploadRequest,
        scope: Scope,
    ) -> UploadResult:
        """Ingest an upload into a scope.

        Args:
            context: Acting principal and public base URL.
            request: Validated upload.
            scope: Resolved, authorized target scope.

        Returns:
            The new item, its scope and its embed descriptor.

        Raises:
            ContentTypeUnavailableError: If no handler is enabled for the scope.
            IngestionFailedError: If the handler fails or returns nothing.
        """
        handler = await self._registry.resolve(self._content_kind, scope)

        blob = await self._staging.stage(request.data, context.principal_id, request.filename)
        try:
            item = await self._ingest(handler, blob, scope, context)
            item = await self._apply_title(item, request.title)
        finally:
            await self._discard(blob)

        logger.info(
            "Uploaded content: id=%s, name=%s, scope=%s, by=%s",
            item.id,
            item.name,
            scope.id,
            context.principal_id,
        )

        return UploadResult(
            item=item,
            scope=scope,
            embed=self._embed_resolver.describe(context, item),
        )

    async def _ingest(
        self,
        handler: BaseContentTypeHandler,
        blob: StagedBlob,
        scope: Scope,
        context: RequestContext,
    ) -> ContentItem:
        """Run the handler, normalising every failure to IngestionFailedError."""
        try:
            item = await handler.ingest(blob, scope, context.principal_id)
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            logger.error(
                "Content ingestion failed: kind=%s, scope=%s, error=%s",
                self._content_kind.value,
                scope.id,
                message,
            )
            raise IngestionFailedError(
                f"H5P upload failed: {message}",
                details={"error_type": type(e).__name__},
            ) from e

        if item is None:
            raise IngestionFailedError("H5P upload failed: handler produced no content item")
        return item

    async def _apply_title(self, item: ContentItem, title: str) -> ContentItem:
        """Rename an item to the requested title.

        Rename failures never roll back the upload.
        """
        if not title or title == item.name:
            return item

        try:
            return await self._repository.rename_item(item.id, title)
        except Exception as e:
            logger.warning(
                "Could not rename content %s to %r, keeping %r: %s",
                item.id,
                title,
                item.name,
                e,
            )
            return item

    async def _discard(self, blob: StagedBlob) -> None:
        """Release a staged blob, logging instead of raising on failure."""
        try:
            await self._staging.release(blob)
        except Exception as e:
            logger.warning(
                "Failed to release staged upload: owner=%s, token=%s, error=%s",
                blob.owner_id,
                blob.token,
                e,
            )

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base content-type handler.

A handler owns the ingestion of one content kind: it reads the staged
upload, creates the content item in the repository and attaches the
binary to it.

Example:
    class H5PContentTypeHandler(BaseContentTypeHandler):
        @property
        def kind(self) -> ContentKind:
            return ContentKind.H5P
"""

import logging
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Any

from h5p_api.services.h5p.models import ContentItem, ContentKind, Scope, StagedBlob
from h5p_api.services.h5p.protocols import (
    ContentRepositoryProtocol,
    StagingAreaProtocol,
)

logger = logging.getLogger(__name__)


class BaseContentTypeHandler(ABC):
    """Abstract base class for content-type handlers.

    Attributes:
        kind: Content kind used as the registry key.
        display_name: Human-readable name of the content type.
        mime_type: MIME type of stored binaries.
    """

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        staging: StagingAreaProtocol,
    ) -> None:
        """Initialize the handler.

        Args:
            repository: Content repository the handler writes to.
            staging: Staging area uploads are read from.
        """
        self._repository = repository
        self._staging = staging

    @property
    @abstractmethod
    def kind(self) -> ContentKind:
        """Get the content kind.

        Returns:
            Content kind used for registry lookup.
        """
        pass

    @property
    def display_name(self) -> str:
        """Get the display name of the content type."""
        return self.kind.value

    @property
    def mime_type(self) -> str:
        """Get the MIME type of stored binaries."""
        return "application/octet-stream"

    def derive_name(self, filename: str) -> str:
        """Derive an item name from the upload filename.

        Args:
            filename: Sanitized upload filename.

        Returns:
            Filename without its extension, or the filename itself if
            nothing else is left.
        """
        return PurePosixPath(filename).stem or filename

    def validate(self, data: bytes, filename: str) -> None:
        """Validate staged bytes before anything is persisted.

        Subclasses raise to reject a package. The default accepts everything.

        Args:
            data: Staged bytes.
            filename: Upload filename.
        """
        return None

    async def ingest(self, blob: StagedBlob, scope: Scope, owner_id: str) -> ContentItem | None:
        """Turn a staged blob into a persisted content item.

        Args:
            blob: Staged upload.
            scope: Scope the item is created in.
            owner_id: Principal creating the item.

        Returns:
            The new content item with its binary attached. If attaching
            fails, the new item is deleted before the error propagates.
        """
        data = await self._staging.read(blob)
        self.validate(data, blob.filename)

        item = await self._repository.create_item(
            name=self.derive_name(blob.filename),
            scope_id=scope.id,
            kind=self.kind,
            owner_id=owner_id,
        )
        try:
            item = await self._repository.attach_file(item.id, blob.filename, data)
        except Exception:
            await self._discard(item.id)
            raise

        logger.info(
            "Ingested content: id=%s, kind=%s, scope=%s, size=%d",
            item.id,
            self.kind.value,
            scope.id,
            len(data),
        )
        return item

    async def _discard(self, content_id: int) -> None:
        """Remove an item whose binary could not be attached.

        A failure here is logged; the caller re-raises the attach error.
        """
        try:
            await self._repository.delete_item(content_id)
            logger.warning("Discarded partially ingested item: id=%s", content_id)
        except Exception as e:
            logger.error(
                "Failed to discard partially ingested item: id=%s, error=%s",
                content_id,
                str(e),
            )

    def get_content_info(self) -> dict[str, Any]:
        """Get handler information for the service catalogue.

        Returns:
            Dictionary describing the content type.
        """
        return {
            "kind": self.kind.value,
            "name": self.display_name,
            "mime_type": self.mime_type,
        }

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""H5P content bank service.

Entry point for the remote-callable functions. Every call follows the
same sequence: parameter validation, scope resolution, capability check,
then the operation itself.

Usage:
    service = H5PContentService(
        repository=repository,
        staging=StagingArea(),
        registry=registry,
        gate=CapabilityGate(repository),
    )

    context = RequestContext(principal_id="user-7", base_url="https://lms.example.com")
    result = await service.upload(context, payload_base64="SGVsbG8=", filename="demo.h5p")
"""

import logging
from typing import Any

from h5p_api.services.h5p import definitions
from h5p_api.services.h5p.embed import EmbedResolver
from h5p_api.services.h5p.exceptions import ContentNotFoundError
from h5p_api.services.h5p.handlers.registry import ContentTypeRegistry
from h5p_api.services.h5p.lister import Lister
from h5p_api.services.h5p.models import (
    EmbedResult,
    ListResult,
    RequestContext,
    StoredFile,
    UploadResult,
)
from h5p_api.services.h5p.protocols import (
    AuthorizationGateProtocol,
    ContentRepositoryProtocol,
    StagingAreaProtocol,
)
from h5p_api.services.h5p.scope import ScopeResolver
from h5p_api.services.h5p.uploader import DEFAULT_FILENAME, Uploader, validate_upload

logger = logging.getLogger(__name__)


class H5PContentService:
    """Facade over the upload, list and embed operations.

    Attributes:
        scopes: Scope resolver shared by all operations.
        uploader: Upload ingestion.
        lister: Scope listing.
        embeds: Embed identity resolution.
    """

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        staging: StagingAreaProtocol,
        registry: ContentTypeRegistry,
        gate: AuthorizationGateProtocol,
        iframe_width: str = "100%",
        iframe_height: str = "600",
    ) -> None:
        """Initialize the service.

        Args:
            repository: Content repository.
            staging: Upload staging area.
            registry: Content-type handler registry.
            gate: Authorization gate.
            iframe_width: Width attribute of generated markup.
            iframe_height: Height attribute of generated markup.
        """
        self._repository = repository
        self._registry = registry
        self._gate = gate

        self.scopes = ScopeResolver(repository)
        self.embeds = EmbedResolver(repository, iframe_width, iframe_height)
        self.uploader = Uploader(repository, staging, registry, self.embeds)
        self.lister = Lister(repository, self.embeds)

    async def upload(
        self,
        context: RequestContext,
        payload_base64: str,
        filename: str = DEFAULT_FILENAME,
        title: str = "",
        scope_id: int = 0,
        collection_id: int = 0,
    ) -> UploadResult:
        """Upload H5P content to the content bank.

        Args:
            context: Acting principal and public base URL.
            payload_base64: Base64 encoded package.
            filename: Filename for the stored package.
            title: Display name; derived from the filename when empty.
            scope_id: Target scope id (0 = not given).
            collection_id: Target collection id (0 = not given).

        Returns:
            The new item with its embed descriptor.

        Raises:
            InvalidPayloadError: If the payload or filename is invalid.
            ScopeNotFoundError: If the target scope does not exist.
            AuthorizationDeniedError: If the principal may not upload there.
            ContentTypeUnavailableError: If H5P is not enabled for the scope.
            IngestionFailedError: If the package could not be ingested.
        """
        request = validate_upload(payload_base64, filename, title)
        scope = await self.scopes.resolve(scope_id, collection_id)
        await self._gate.require(context.principal_id, definitions.UPLOAD.capability, scope)

        return await self.uploader.upload(context, request, scope)

    async def list(
        self,
        context: RequestContext,
        scope_id: int = 0,
        collection_id: int = 0,
    ) -> ListResult:
        """List H5P content in a scope.

        Raises:
            ScopeNotFoundError: If the scope does not exist.
            AuthorizationDeniedError: If the principal may not access the scope.
        """
        scope = await self.scopes.resolve(scope_id, collection_id)
        await self._gate.require(context.principal_id, definitions.LIST.capability, scope)

        return await self.lister.list(context, scope)

    async def get_embed(self, context: RequestContext, content_id: int) -> EmbedResult:
        """Get the embed code of an existing item.

        Raises:
            ContentNotFoundError: If the item does not exist.
            AuthorizationDeniedError: If the principal may not access its scope.
        """
        item, scope = await self.embeds.load(content_id)
        await self._gate.require(context.principal_id, definitions.GET_EMBED.capability, scope)

        return EmbedResult(item=item, embed=self.embeds.describe(context, item))

    async def get_public_file(
        self,
        scope_id: int,
        content_id: int,
        filename: str,
    ) -> tuple[StoredFile, str]:
        """Fetch the published binary behind a public file URL.

        Args:
            scope_id: Scope id from the URL.
            content_id: Content id from the URL.
            filename: Filename from the URL.

        Returns:
            The stored file and its MIME type.

        Raises:
            ContentNotFoundError: If the item, its file, or the URL parts
                do not match.
        """
        item = await self._repository.get_item(content_id)
        if item is None or item.scope_id != scope_id or item.filename != filename:
            raise ContentNotFoundError("Content not found", content_id=content_id)

        stored = await self._repository.get_file(content_id)
        if stored is None:
            raise ContentNotFoundError("Content has no stored file", content_id=content_id)

        handler = self._registry.get(item.content_kind)
        mime_type = handler.mime_type if handler else "application/octet-stream"
        return stored, mime_type

    def describe_functions(self) -> dict[str, Any]:
        """Describe the remote-callable functions and content types."""
        return {
            "service": definitions.SERVICE_NAME,
            "shortname": definitions.SERVICE_SHORTNAME,
            "functions": [f.to_dict() for f in definitions.FUNCTIONS],
            "content_types": self._registry.get_all_info(),
        }


# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Collaborator contracts for the H5P content bank operations.

The operations only talk to these protocols, so the content repository,
the staging area and the authorization gate can each be swapped
(in-memory for development and tests, SQL and Redis in deployment).
"""

from typing import Protocol, runtime_checkable

from h5p_api.services.h5p.models import (
    Capability,
    ContentItem,
    ContentKind,
    Scope,
    StagedBlob,
    StoredFile,
)


class ContentRepositoryProtocol(Protocol):
    """Protocol for the content bank repository."""

    async def get_item(self, content_id: int) -> ContentItem | None:
        """Fetch a content item by id, or None if absent."""
        ...

    async def find_items(self, scope_id: int, kind: ContentKind) -> list[ContentItem]:
        """Return every item of a content kind within a scope."""
        ...

    async def get_scope(self, scope_id: int) -> Scope | None:
        """Fetch a scope by id, or None if absent."""
        ...

    async def get_scope_for_collection(self, collection_id: int) -> Scope | None:
        """Fetch the scope implied by a collection, or None if absent."""
        ...

    async def get_default_scope(self) -> Scope:
        """Return the process-wide default (system) scope."""
        ...

    async def is_content_kind_enabled(self, kind: ContentKind, scope: Scope) -> bool:
        """Check whether a content kind is enabled for a scope."""
        ...

    async def create_item(
        self,
        name: str,
        scope_id: int,
        kind: ContentKind,
        owner_id: str | None,
    ) -> ContentItem:
        """Create a content item without a stored binary."""
        ...

    async def attach_file(self, content_id: int, filename: str, data: bytes) -> ContentItem:
        """Attach (or replace) the stored binary of an item."""
        ...

    async def rename_item(self, content_id: int, name: str) -> ContentItem:
        """Change the display name of an item."""
        ...

    async def delete_item(self, content_id: int) -> bool:
        """Remove an item and its stored binary. Returns False if it was absent."""
        ...

    async def get_file(self, content_id: int) -> StoredFile | None:
        """Return the stored binary of an item, including its bytes."""
        ...

    async def has_capability(
        self,
        principal_id: str,
        capability: Capability,
        scope: Scope,
    ) -> bool:
        """Check a capability grant on a scope or any of its ancestors."""
        ...


class StagingAreaProtocol(Protocol):
    """Protocol for the principal-scoped upload staging area."""

    async def stage(self, data: bytes, owner_id: str, filename: str) -> StagedBlob:
        """Store bytes under a fresh random token for an owner."""
        ...

    async def read(self, blob: StagedBlob) -> bytes:
        """Read back staged bytes."""
        ...

    async def release(self, blob: StagedBlob) -> bool:
        """Delete a staged blob. Returns False if it was already gone."""
        ...


@runtime_checkable
class ContentTypeHandlerProtocol(Protocol):
    """Pluggable component that ingests one content kind."""

    @property
    def kind(self) -> ContentKind:
        """Content kind this handler ingests."""
        ...

    async def ingest(self, blob: StagedBlob, scope: Scope, owner_id: str) -> ContentItem | None:
        """Turn a staged blob into a persisted content item."""
        ...


class AuthorizationGateProtocol(Protocol):
    """Protocol for capability checks."""

    async def require(self, principal_id: str, capability: Capability, scope: Scope) -> None:
        """Raise AuthorizationDeniedError unless the principal holds the capability."""
        ...

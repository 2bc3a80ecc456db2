# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-memory content repository.

Used for development and tests when no database is configured. Holds
scopes, items, per-scope content kind switches and capability grants in
plain dictionaries. Data is lost on restart.

Usage:
    repository = InMemoryContentRepository()
    course = repository.add_scope(collection_id=7)
    repository.grant("user-7", Capability.UPLOAD, course.id)
"""

import logging
from itertools import count

from h5p_api.services.h5p.models import (
    Capability,
    ContentItem,
    ContentKind,
    Scope,
    ScopeKind,
    StoredFile,
)
from h5p_api.utils.datetime import utc_now

logger = logging.getLogger(__name__)

SYSTEM_SCOPE_ID = 1


class InMemoryContentRepository:
    """Dictionary-backed implementation of ContentRepositoryProtocol."""

    def __init__(self) -> None:
        """Initialize with the system scope only."""
        self._scopes: dict[int, Scope] = {
            SYSTEM_SCOPE_ID: Scope(id=SYSTEM_SCOPE_ID, kind=ScopeKind.SYSTEM),
        }
        self._items: dict[int, ContentItem] = {}
        self._disabled: set[tuple[ContentKind, int]] = set()
        self._grants: set[tuple[str, Capability, int]] = set()
        self._scope_ids = count(SYSTEM_SCOPE_ID + 1)
        self._item_ids = count(1)

    # ========== Setup helpers ==========

    def add_scope(
        self,
        collection_id: int | None = None,
        scope_id: int | None = None,
        parent_id: int = SYSTEM_SCOPE_ID,
    ) -> Scope:
        """Create a collection scope under a parent scope.

        Args:
            collection_id: Collection the scope belongs to.
            scope_id: Explicit id; allocated when omitted.
            parent_id: Enclosing scope.

        Returns:
            The new scope.
        """
        new_id = scope_id if scope_id is not None else next(self._scope_ids)
        scope = Scope(
            id=new_id,
            kind=ScopeKind.COLLECTION,
            collection_id=collection_id,
            parent_id=parent_id,
        )
        self._scopes[new_id] = scope
        return scope

    def disable_content_kind(self, kind: ContentKind, scope_id: int) -> None:
        """Disable a content kind for a scope and its descendants."""
        self._disabled.add((kind, scope_id))

    def grant(self, principal_id: str, capability: Capability, scope_id: int) -> None:
        """Grant a capability on a scope and its descendants."""
        self._grants.add((principal_id, capability, scope_id))

    # ========== Scopes ==========

    async def get_scope(self, scope_id: int) -> Scope | None:
        return self._scopes.get(scope_id)

    async def get_scope_for_collection(self, collection_id: int) -> Scope | None:
        for scope in self._scopes.values():
            if scope.kind == ScopeKind.COLLECTION and scope.collection_id == collection_id:
                return scope
        return None

    async def get_default_scope(self) -> Scope:
        return self._scopes[SYSTEM_SCOPE_ID]

    def _lineage(self, scope: Scope) -> list[int]:
        """Scope id followed by its ancestors' ids."""
        ids = []
        current: Scope | None = scope
        while current is not None and current.id not in ids:
            ids.append(current.id)
            current = self._scopes.get(current.parent_id) if current.parent_id else None
        return ids

    async def is_content_kind_enabled(self, kind: ContentKind, scope: Scope) -> bool:
        return not any((kind, scope_id) in self._disabled for scope_id in self._lineage(scope))

    async def has_capability(
        self,
        principal_id: str,
        capability: Capability,
        scope: Scope,
    ) -> bool:
        return any(
            (principal_id, capability, scope_id) in self._grants
            for scope_id in self._lineage(scope)
        )

    # ========== Items ==========

    async def get_item(self, content_id: int) -> ContentItem | None:
        return self._items.get(content_id)

    async def find_items(self, scope_id: int, kind: ContentKind) -> list[ContentItem]:
        return [
            item for item in self._items.values()
            if item.scope_id == scope_id and item.content_kind == kind
        ]

    async def create_item(
        self,
        name: str,
        scope_id: int,
        kind: ContentKind,
        owner_id: str | None,
    ) -> ContentItem:
        if scope_id not in self._scopes:
            raise ValueError(f"Scope {scope_id} does not exist")

        item = ContentItem(
            id=next(self._item_ids),
            name=name,
            scope_id=scope_id,
            content_kind=kind,
            owner_id=owner_id,
        )
        self._items[item.id] = item
        logger.debug("Created content item: id=%s, scope=%s", item.id, scope_id)
        return item

    async def attach_file(self, content_id: int, filename: str, data: bytes) -> ContentItem:
        item = self._require_item(content_id)
        item.stored_file = StoredFile(filename=filename, size=len(data), data=data)
        item.modified_at = utc_now()
        return item

    async def rename_item(self, content_id: int, name: str) -> ContentItem:
        item = self._require_item(content_id)
        item.name = name
        item.modified_at = utc_now()
        return item

    async def delete_item(self, content_id: int) -> bool:
        deleted = self._items.pop(content_id, None) is not None
        if deleted:
            logger.debug("Deleted content item: id=%s", content_id)
        return deleted

    async def get_file(self, content_id: int) -> StoredFile | None:
        item = self._items.get(content_id)
        return item.stored_file if item else None

    def _require_item(self, content_id: int) -> ContentItem:
        item = self._items.get(content_id)
        if item is None:
            raise KeyError(f"Content item {content_id} does not exist")
        return item

    def __len__(self) -> int:
        """Number of stored items."""
        return len(self._items)

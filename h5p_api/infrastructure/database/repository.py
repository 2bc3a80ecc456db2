# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy implementation of the content repository.

Every method runs in its own session obtained from the session factory,
which commits on success and rolls back on error.

Example:
    repository = SqlContentRepository()  # uses get_session
    scope = await repository.get_default_scope()
"""

import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from h5p_api.infrastructure.database.connection import (
    SYSTEM_SCOPE_ID,
    DatabaseError,
    get_session,
)
from h5p_api.infrastructure.database.models import (
    CapabilityGrantRecord,
    ContentFileRecord,
    ContentItemRecord,
    ContentTypeSettingRecord,
    ScopeRecord,
)
from h5p_api.services.h5p.models import (
    Capability,
    ContentItem,
    ContentKind,
    Scope,
    ScopeKind,
    StoredFile,
)
from h5p_api.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _to_scope(record: ScopeRecord) -> Scope:
    return Scope(
        id=record.id,
        kind=ScopeKind(record.kind),
        collection_id=record.collection_id,
        parent_id=record.parent_id,
    )


def _to_file(record: ContentFileRecord | None) -> StoredFile | None:
    if record is None:
        return None
    return StoredFile(filename=record.filename, size=record.size, data=record.data)


def _to_item(record: ContentItemRecord, stored_file: StoredFile | None) -> ContentItem:
    return ContentItem(
        id=record.id,
        name=record.name,
        scope_id=record.scope_id,
        content_kind=ContentKind(record.content_kind),
        owner_id=record.owner_id,
        created_at=ensure_utc(record.created_at),
        modified_at=ensure_utc(record.updated_at),
        stored_file=stored_file,
    )


class SqlContentRepository:
    """Content repository backed by the content bank database."""

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        """Initialize the repository.

        Args:
            session_factory: Returns an async context manager yielding a session.
        """
        self._session_factory = session_factory

    # ========== Scopes ==========

    async def get_scope(self, scope_id: int) -> Scope | None:
        async with self._session_factory() as session:
            record = await session.get(ScopeRecord, scope_id)
            return _to_scope(record) if record else None

    async def get_scope_for_collection(self, collection_id: int) -> Scope | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ScopeRecord).where(ScopeRecord.collection_id == collection_id)
            )
            record = result.scalar_one_or_none()
            return _to_scope(record) if record else None

    async def get_default_scope(self) -> Scope:
        scope = await self.get_scope(SYSTEM_SCOPE_ID)
        if scope is None:
            raise DatabaseError("System scope is missing. Run create_schema() first.")
        return scope

    async def _lineage(self, session: AsyncSession, scope: Scope) -> list[int]:
        """Scope id followed by its ancestors' ids, nearest first."""
        ids = [scope.id]
        parent_id = scope.parent_id
        while parent_id is not None and parent_id not in ids:
            ids.append(parent_id)
            parent = await session.get(ScopeRecord, parent_id)
            parent_id = parent.parent_id if parent else None
        return ids

    async def is_content_kind_enabled(self, kind: ContentKind, scope: Scope) -> bool:
        async with self._session_factory() as session:
            lineage = await self._lineage(session, scope)
            result = await session.execute(
                select(ContentTypeSettingRecord).where(
                    ContentTypeSettingRecord.content_kind == kind.value,
                    ContentTypeSettingRecord.scope_id.in_(lineage),
                )
            )
            settings = {row.scope_id: row.enabled for row in result.scalars().all()}

        # Nearest explicit setting wins, enabled when none is set
        for scope_id in lineage:
            if scope_id in settings:
                return settings[scope_id]
        return True

    async def has_capability(
        self,
        principal_id: str,
        capability: Capability,
        scope: Scope,
    ) -> bool:
        async with self._session_factory() as session:
            lineage = await self._lineage(session, scope)
            result = await session.execute(
                select(CapabilityGrantRecord.id)
                .where(
                    CapabilityGrantRecord.principal_id == principal_id,
                    CapabilityGrantRecord.capability == capability.value,
                    CapabilityGrantRecord.scope_id.in_(lineage),
                )
                .limit(1)
            )
            return result.scalar_one_or_none() is not None

    # ========== Items ==========

    async def get_item(self, content_id: int) -> ContentItem | None:
        async with self._session_factory() as session:
            record = await session.get(
                ContentItemRecord,
                content_id,
                options=[selectinload(ContentItemRecord.file)],
            )
            if record is None:
                return None
            return _to_item(record, _to_file(record.file))

    async def find_items(self, scope_id: int, kind: ContentKind) -> list[ContentItem]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ContentItemRecord)
                .options(selectinload(ContentItemRecord.file))
                .where(
                    ContentItemRecord.scope_id == scope_id,
                    ContentItemRecord.content_kind == kind.value,
                )
                .order_by(ContentItemRecord.id)
            )
            return [_to_item(r, _to_file(r.file)) for r in result.scalars().all()]

    async def create_item(
        self,
        name: str,
        scope_id: int,
        kind: ContentKind,
        owner_id: str | None,
    ) -> ContentItem:
        now = utc_now()
        async with self._session_factory() as session:
            record = ContentItemRecord(
                name=name,
                scope_id=scope_id,
                content_kind=kind.value,
                owner_id=owner_id,
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            await session.flush()
            logger.debug("Created content item: id=%s, scope=%s", record.id, scope_id)
            return _to_item(record, None)

    async def attach_file(self, content_id: int, filename: str, data: bytes) -> ContentItem:
        async with self._session_factory() as session:
            record = await self._load_item(session, content_id)
            record.file = ContentFileRecord(filename=filename, size=len(data), data=data)
            record.updated_at = utc_now()
            await session.flush()
            return _to_item(record, _to_file(record.file))

    async def rename_item(self, content_id: int, name: str) -> ContentItem:
        async with self._session_factory() as session:
            record = await self._load_item(session, content_id)
            record.name = name
            record.updated_at = utc_now()
            await session.flush()
            return _to_item(record, _to_file(record.file))

    async def delete_item(self, content_id: int) -> bool:
        async with self._session_factory() as session:
            record = await session.get(ContentItemRecord, content_id)
            if record is None:
                return False
            await session.delete(record)
            await session.flush()
            logger.debug("Deleted content item: id=%s", content_id)
            return True

    async def get_file(self, content_id: int) -> StoredFile | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ContentFileRecord).where(ContentFileRecord.content_id == content_id)
            )
            return _to_file(result.scalar_one_or_none())

    async def _load_item(self, session: AsyncSession, content_id: int) -> ContentItemRecord:
        record = await session.get(
            ContentItemRecord,
            content_id,
            options=[selectinload(ContentItemRecord.file)],
        )
        if record is None:
            raise DatabaseError(f"Content item {content_id} does not exist")
        return record

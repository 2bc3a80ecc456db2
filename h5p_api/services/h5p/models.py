# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain types for the H5P content bank.

These are plain value objects shared by the operations and by every
repository adapter. None of them know how they are persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from h5p_api.utils.datetime import utc_now


class ContentKind(str, Enum):
    """Content kinds a handler can be registered for."""

    H5P = "h5p"


class Capability(str, Enum):
    """Capabilities checked by the authorization gate."""

    ACCESS = "contentbank:access"
    UPLOAD = "contentbank:upload"


class ScopeKind(str, Enum):
    """Kinds of authorization/storage scope."""

    SYSTEM = "system"
    COLLECTION = "collection"


@dataclass(frozen=True)
class Scope:
    """Authorization and storage boundary that owns content items.

    Attributes:
        id: Scope identifier.
        kind: System scope or a collection scope.
        collection_id: Collection the scope belongs to, for collection scopes.
        parent_id: Enclosing scope, used for capability inheritance.
    """

    id: int
    kind: ScopeKind = ScopeKind.SYSTEM
    collection_id: int | None = None
    parent_id: int | None = None


@dataclass
class StoredFile:
    """Binary attached to a content item."""

    filename: str
    size: int
    data: bytes = b""


@dataclass
class ContentItem:
    """A content bank entry.

    Attributes:
        id: Content identifier.
        name: Display name.
        scope_id: Owning scope.
        content_kind: Content kind tag.
        owner_id: Principal that created the item.
        created_at: Creation timestamp (UTC).
        modified_at: Last modification timestamp (UTC).
        stored_file: Attached binary, absent right after creation.
    """

    id: int
    name: str
    scope_id: int
    content_kind: ContentKind = ContentKind.H5P
    owner_id: str | None = None
    created_at: datetime = field(default_factory=utc_now)
    modified_at: datetime = field(default_factory=utc_now)
    stored_file: StoredFile | None = None

    @property
    def filename(self) -> str:
        """Stored filename, or empty string when no binary is attached."""
        return self.stored_file.filename if self.stored_file else ""


@dataclass(frozen=True)
class StagedBlob:
    """Handle to an upload held in the staging area.

    Attributes:
        token: Random token identifying the blob within its owner's area.
        owner_id: Principal the blob is staged for.
        filename: Sanitized upload filename.
        size: Payload size in bytes.
        created_at: When the blob was staged.
    """

    token: str
    owner_id: str
    filename: str
    size: int
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class EmbedDescriptor:
    """Public-facing representation of a content item. Never stored."""

    embed_url: str
    iframe_html: str
    short_code: str


@dataclass(frozen=True)
class RequestContext:
    """Per-request platform context passed explicitly to every operation.

    Attributes:
        principal_id: Acting principal.
        base_url: Public base URL without trailing slash.
    """

    principal_id: str
    base_url: str


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful upload."""

    item: ContentItem
    scope: Scope
    embed: EmbedDescriptor


@dataclass(frozen=True)
class ContentItemSummary:
    """One row of a listing."""

    content_id: int
    name: str
    scope_id: int
    created_at: int
    modified_at: int
    filename: str
    embed_url: str


@dataclass(frozen=True)
class ListResult:
    """Listing of content items within a scope."""

    items: tuple[ContentItemSummary, ...] = ()

    @property
    def count(self) -> int:
        """Number of items, always equal to len(items)."""
        return len(self.items)


@dataclass(frozen=True)
class UploadRequest:
    """Validated upload parameters.

    Attributes:
        data: Decoded, non-empty payload.
        filename: Single-segment filename.
        title: Desired item name, never empty.
    """

    data: bytes
    filename: str
    title: str


@dataclass(frozen=True)
class EmbedResult:
    """Embed identity of an existing item."""

    item: ContentItem
    embed: EmbedDescriptor

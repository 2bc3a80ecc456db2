# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Embed identity of content items.

The embed descriptor is a pure function of (base URL, scope id, item id,
stored filename). It is recomputed on every request and never cached.

Example:
    descriptor = build_embed_descriptor(
        "https://lms.example.com", scope_id=1, content_id=5, filename="quiz.h5p"
    )
    descriptor.short_code  # "{h5p:5}"
"""

import html
from urllib.parse import quote, quote_plus

from h5p_api.services.h5p.exceptions import ContentNotFoundError, ScopeNotFoundError
from h5p_api.services.h5p.models import (
    ContentItem,
    ContentKind,
    EmbedDescriptor,
    RequestContext,
    Scope,
)
from h5p_api.services.h5p.protocols import ContentRepositoryProtocol

# Route serving stored binaries, relative to the public base URL
PLUGINFILE_PATH = "/pluginfile"
# Route of the embeddable player, relative to the public base URL
EMBED_PATH = "/embed"
# File area stored binaries are published from
PUBLIC_FILE_AREA = "contentbank/public"


def public_file_url(base_url: str, scope_id: int, content_id: int, filename: str) -> str:
    """Build the public URL of an item's stored binary.

    Args:
        base_url: Public base URL without trailing slash.
        scope_id: Owning scope.
        content_id: Content item id.
        filename: Stored filename, may be empty.

    Returns:
        Absolute URL of the file.
    """
    return (
        f"{base_url}{PLUGINFILE_PATH}/{scope_id}/{PUBLIC_FILE_AREA}/"
        f"{content_id}/{quote(filename)}"
    )


def embed_url(base_url: str, scope_id: int, content_id: int, filename: str) -> str:
    """Build the embed URL of a content item."""
    file_url = public_file_url(base_url, scope_id, content_id, filename)
    return f"{base_url}{EMBED_PATH}?url={quote_plus(file_url)}"


def iframe_html(url: str, width: str = "100%", height: str = "600") -> str:
    """Build ready-to-use iframe markup for an embed URL."""
    return (
        f'<iframe src="{html.escape(url, quote=True)}" '
        f'width="{width}" height="{height}" '
        f'frameborder="0" allowfullscreen="allowfullscreen"></iframe>'
    )


def short_code(content_id: int, kind: ContentKind = ContentKind.H5P) -> str:
    """Build the filter short-code of a content item, e.g. {h5p:42}."""
    return "{" + f"{kind.value}:{content_id}" + "}"


def build_embed_descriptor(
    base_url: str,
    scope_id: int,
    content_id: int,
    filename: str,
    kind: ContentKind = ContentKind.H5P,
    width: str = "100%",
    height: str = "600",
) -> EmbedDescriptor:
    """Compute the full embed descriptor of a content item.

    Args:
        base_url: Public base URL without trailing slash.
        scope_id: Owning scope.
        content_id: Content item id.
        filename: Stored filename, empty when no binary is attached.
        kind: Content kind used in the short-code.
        width: iframe width attribute.
        height: iframe height attribute.

    Returns:
        EmbedDescriptor with URL, markup and short-code.
    """
    url = embed_url(base_url, scope_id, content_id, filename)
    return EmbedDescriptor(
        embed_url=url,
        iframe_html=iframe_html(url, width=width, height=height),
        short_code=short_code(content_id, kind),
    )


class EmbedResolver:
    """Re-derives the embed identity of stored content items."""

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        iframe_width: str = "100%",
        iframe_height: str = "600",
    ) -> None:
        """Initialize the resolver.

        Args:
            repository: Content repository to read items and scopes from.
            iframe_width: Width attribute of generated markup.
            iframe_height: Height attribute of generated markup.
        """
        self._repository = repository
        self._iframe_width = iframe_width
        self._iframe_height = iframe_height

    def describe(self, context: RequestContext, item: ContentItem) -> EmbedDescriptor:
        """Compute the embed descriptor of an item."""
        return build_embed_descriptor(
            context.base_url,
            scope_id=item.scope_id,
            content_id=item.id,
            filename=item.filename,
            kind=item.content_kind,
            width=self._iframe_width,
            height=self._iframe_height,
        )

    async def load(self, content_id: int) -> tuple[ContentItem, Scope]:
        """Fetch an item and its owning scope.

        Args:
            content_id: Content item id.

        Returns:
            The item and the scope it belongs to.

        Raises:
            ContentNotFoundError: If the item does not exist.
            ScopeNotFoundError: If the item's scope no longer exists.
        """
        item = await self._repository.get_item(content_id)
        if item is None:
            raise ContentNotFoundError("Content not found", content_id=content_id)

        scope = await self._repository.get_scope(item.scope_id)
        if scope is None:
            raise ScopeNotFoundError("Scope not found", scope_id=item.scope_id)

        return item, scope

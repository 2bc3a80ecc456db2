# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Listing of content items within a scope."""

import logging

from h5p_api.services.h5p.embed import EmbedResolver
from h5p_api.services.h5p.models import (
    ContentItemSummary,
    ContentKind,
    ListResult,
    RequestContext,
    Scope,
)
from h5p_api.services.h5p.protocols import ContentRepositoryProtocol
from h5p_api.utils.datetime import to_timestamp

logger = logging.getLogger(__name__)


class Lister:
    """Summarises the items of one content kind in a scope.

    Items are returned in repository order; the whole result is gathered
    before it is returned.
    """

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        embed_resolver: EmbedResolver,
        content_kind: ContentKind = ContentKind.H5P,
    ) -> None:
        self._repository = repository
        self._embed_resolver = embed_resolver
        self._content_kind = content_kind

    async def list(self, context: RequestContext, scope: Scope) -> ListResult:
        """List the content items of a scope.

        Args:
            context: Acting principal and public base URL.
            scope: Resolved, authorized scope.

        Returns:
            ListResult whose count always equals the number of items.
        """
        items = await self._repository.find_items(scope.id, self._content_kind)

        summaries = tuple(
            ContentItemSummary(
                content_id=item.id,
                name=item.name,
                scope_id=item.scope_id,
                created_at=to_timestamp(item.created_at),
                modified_at=to_timestamp(item.modified_at),
                filename=item.filename,
                embed_url=self._embed_resolver.describe(context, item).embed_url,
            )
            for item in items
        )

        logger.debug("Listed %d items in scope %s", len(summaries), scope.id)
        return ListResult(items=summaries)

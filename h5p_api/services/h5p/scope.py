# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Scope resolution for incoming scope descriptors."""

import logging

from h5p_api.services.h5p.exceptions import ScopeNotFoundError
from h5p_api.services.h5p.models import Scope
from h5p_api.services.h5p.protocols import ContentRepositoryProtocol

logger = logging.getLogger(__name__)


class ScopeResolver:
    """Maps (scope_id, collection_id) to a concrete Scope.

    First match wins: an explicit scope id, then the scope of a
    collection, then the default scope. Holds no mutable state.
    """

    def __init__(self, repository: ContentRepositoryProtocol) -> None:
        self._repository = repository

    async def resolve(self, scope_id: int = 0, collection_id: int = 0) -> Scope:
        """Resolve a scope descriptor.

        Args:
            scope_id: Explicit scope id, 0 when not given.
            collection_id: Containing collection id, 0 when not given.

        Returns:
            The resolved scope.

        Raises:
            ScopeNotFoundError: If the explicit scope or the collection's
                scope does not exist.
        """
        if scope_id > 0:
            scope = await self._repository.get_scope(scope_id)
            if scope is None:
                raise ScopeNotFoundError("Scope not found", scope_id=scope_id)
            return scope

        if collection_id > 0:
            scope = await self._repository.get_scope_for_collection(collection_id)
            if scope is None:
                raise ScopeNotFoundError(
                    "Collection not found",
                    collection_id=collection_id,
                )
            return scope

        return await self._repository.get_default_scope()

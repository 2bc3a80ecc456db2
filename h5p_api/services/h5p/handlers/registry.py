# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content-type handler registry.

Handlers are keyed by ContentKind and looked up by exact key. A handler
is only usable in a scope when its kind is enabled both globally
(settings) and for that scope (repository).

Usage:
    registry = ContentTypeRegistry(
        handlers=[H5PContentTypeHandler(repository, staging)],
        repository=repository,
        enabled_kinds=["h5p"],
    )

    handler = await registry.resolve(ContentKind.H5P, scope)
"""

import logging
from typing import Any

from h5p_api.services.h5p.exceptions import ContentTypeUnavailableError
from h5p_api.services.h5p.handlers.base import BaseContentTypeHandler
from h5p_api.services.h5p.models import ContentKind, Scope
from h5p_api.services.h5p.protocols import ContentRepositoryProtocol

logger = logging.getLogger(__name__)


class ContentTypeRegistry:
    """Central registry for content-type handlers.

    Attributes:
        _handlers: Dictionary mapping content kind to handler instance.
        _enabled_kinds: Kinds enabled by configuration.
    """

    def __init__(
        self,
        repository: ContentRepositoryProtocol,
        handlers: list[BaseContentTypeHandler] | None = None,
        enabled_kinds: list[str] | None = None,
    ):
        """Initialize the handler registry.

        Args:
            repository: Repository consulted for per-scope enablement.
            handlers: Handlers to register.
            enabled_kinds: Kind tags enabled by configuration. None enables
                every registered kind.
        """
        self._repository = repository
        self._handlers: dict[ContentKind, BaseContentTypeHandler] = {}
        self._enabled_kinds = set(enabled_kinds) if enabled_kinds is not None else None

        for handler in handlers or []:
            self.register(handler)

    def register(self, handler: BaseContentTypeHandler) -> None:
        """Register a handler in the registry.

        Args:
            handler: Handler instance to register.
        """
        if handler.kind in self._handlers:
            logger.warning(
                "Replacing existing handler for content kind: %s",
                handler.kind.value,
            )

        self._handlers[handler.kind] = handler
        logger.debug("Registered content-type handler: %s", handler.kind.value)

    def get(self, kind: ContentKind) -> BaseContentTypeHandler | None:
        """Get handler by content kind, ignoring enablement.

        Args:
            kind: Content kind.

        Returns:
            Handler instance or None if not registered.
        """
        return self._handlers.get(kind)

    def is_globally_enabled(self, kind: ContentKind) -> bool:
        """Check whether configuration enables a content kind."""
        if self._enabled_kinds is None:
            return True
        return kind.value in self._enabled_kinds

    async def resolve(self, kind: ContentKind, scope: Scope) -> BaseContentTypeHandler:
        """Get the handler for a content kind that is enabled in a scope.

        Args:
            kind: Content kind.
            scope: Scope the content will live in.

        Returns:
            The registered handler.

        Raises:
            ContentTypeUnavailableError: If no handler is registered, or the
                kind is disabled globally or for the scope.
        """
        handler = self._handlers.get(kind)
        if handler is None or not self.is_globally_enabled(kind):
            raise ContentTypeUnavailableError(
                "Content type not found. Make sure it is enabled in the content bank.",
                content_kind=kind.value,
            )

        if not await self._repository.is_content_kind_enabled(kind, scope):
            raise ContentTypeUnavailableError(
                "Content type is disabled for this scope.",
                content_kind=kind.value,
                details={"scope_id": scope.id},
            )

        return handler

    def list_kinds(self) -> list[ContentKind]:
        """List all registered content kinds."""
        return list(self._handlers.keys())

    def get_all_info(self) -> list[dict[str, Any]]:
        """Get information about all registered handlers."""
        return [
            {**handler.get_content_info(), "enabled": self.is_globally_enabled(kind)}
            for kind, handler in self._handlers.items()
        ]

    def __len__(self) -> int:
        """Get number of registered handlers."""
        return len(self._handlers)

    def __contains__(self, kind: ContentKind) -> bool:
        """Check if content kind is registered."""
        return kind in self._handlers

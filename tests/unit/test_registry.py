# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the content-type handler registry."""

import pytest

from h5p_api.services.h5p import ContentKind, ContentTypeRegistry, H5PContentTypeHandler
from h5p_api.services.h5p.exceptions import ContentTypeUnavailableError, ErrorKind
from h5p_api.services.h5p.protocols import ContentTypeHandlerProtocol


class TestContentTypeRegistry:
    """Tests for ContentTypeRegistry."""

    def test_register_and_get(self, repository, staging) -> None:
        """Test exact-key lookup of a registered handler."""
        handler = H5PContentTypeHandler(repository, staging)
        registry = ContentTypeRegistry(repository, handlers=[handler])

        assert registry.get(ContentKind.H5P) is handler
        assert ContentKind.H5P in registry
        assert len(registry) == 1
        assert registry.list_kinds() == [ContentKind.H5P]

    def test_handler_satisfies_protocol(self, repository, staging) -> None:
        assert isinstance(H5PContentTypeHandler(repository, staging), ContentTypeHandlerProtocol)

    def test_empty_registry(self, repository) -> None:
        registry = ContentTypeRegistry(repository)

        assert registry.get(ContentKind.H5P) is None
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_resolve_enabled(self, registry, repository) -> None:
        """Test that an enabled kind resolves in the default scope."""
        scope = await repository.get_default_scope()

        handler = await registry.resolve(ContentKind.H5P, scope)

        assert handler.kind == ContentKind.H5P

    @pytest.mark.asyncio
    async def test_resolve_unregistered(self, repository) -> None:
        """Test that an unregistered kind is unavailable."""
        registry = ContentTypeRegistry(repository)
        scope = await repository.get_default_scope()

        with pytest.raises(ContentTypeUnavailableError) as exc_info:
            await registry.resolve(ContentKind.H5P, scope)

        assert exc_info.value.kind == ErrorKind.CONTENT_TYPE_UNAVAILABLE
        assert exc_info.value.content_kind == "h5p"

    @pytest.mark.asyncio
    async def test_resolve_globally_disabled(self, repository, staging) -> None:
        """Test that configuration can switch a registered kind off."""
        registry = ContentTypeRegistry(
            repository,
            handlers=[H5PContentTypeHandler(repository, staging)],
            enabled_kinds=[],
        )
        scope = await repository.get_default_scope()

        assert not registry.is_globally_enabled(ContentKind.H5P)
        with pytest.raises(ContentTypeUnavailableError):
            await registry.resolve(ContentKind.H5P, scope)

    @pytest.mark.asyncio
    async def test_disabled_on_parent_scope(self, registry, repository, course_scope) -> None:
        """Test that disabling a kind on the system scope affects collections."""
        repository.disable_content_kind(ContentKind.H5P, 1)

        with pytest.raises(ContentTypeUnavailableError):
            await registry.resolve(ContentKind.H5P, course_scope)

    def test_get_all_info(self, registry) -> None:
        """Test the catalogue of registered content types."""
        info = registry.get_all_info()

        assert info == [
            {"kind": "h5p", "name": "H5P", "mime_type": "application/zip", "enabled": True}
        ]

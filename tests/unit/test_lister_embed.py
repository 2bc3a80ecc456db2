# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for listing and embed resolution."""

from urllib.parse import parse_qs, urlparse

import pytest

from h5p_api.services.h5p import RequestContext, build_embed_descriptor
from h5p_api.services.h5p.embed import embed_url, iframe_html, public_file_url, short_code
from h5p_api.services.h5p.exceptions import (
    AuthorizationDeniedError,
    ContentNotFoundError,
    ScopeNotFoundError,
)


class TestEmbedDescriptor:
    """Tests for the pure embed functions."""

    def test_public_file_url(self) -> None:
        """Test the public file URL layout."""
        url = public_file_url("https://lms.example.com", 3, 42, "quiz.h5p")

        assert url == "https://lms.example.com/pluginfile/3/contentbank/public/42/quiz.h5p"

    def test_public_file_url_quotes_filename(self) -> None:
        """Test that the filename is percent-encoded as a path segment."""
        url = public_file_url("https://lms.example.com", 3, 42, "my quiz.h5p")

        assert url.endswith("/42/my%20quiz.h5p")

    def test_embed_url_wraps_file_url(self) -> None:
        """Test that the embed URL carries the file URL as query parameter."""
        url = embed_url("https://lms.example.com", 3, 42, "quiz.h5p")

        parsed = urlparse(url)
        assert parsed.path == "/embed"
        assert parse_qs(parsed.query)["url"] == [
            "https://lms.example.com/pluginfile/3/contentbank/public/42/quiz.h5p"
        ]

    def test_iframe_markup(self) -> None:
        """Test the iframe attributes."""
        markup = iframe_html("https://lms.example.com/embed?url=a&b")

        assert markup.startswith('<iframe src="https://lms.example.com/embed?url=a&amp;b"')
        assert 'width="100%"' in markup
        assert 'height="600"' in markup
        assert 'frameborder="0"' in markup
        assert 'allowfullscreen="allowfullscreen"' in markup
        assert markup.endswith("></iframe>")

    def test_short_code(self) -> None:
        assert short_code(42) == "{h5p:42}"

    def test_descriptor_is_deterministic(self) -> None:
        """Test that the same inputs always give the same descriptor."""
        first = build_embed_descriptor("https://lms.example.com", 1, 5, "quiz.h5p")
        second = build_embed_descriptor("https://lms.example.com", 1, 5, "quiz.h5p")

        assert first == second

    def test_empty_filename(self) -> None:
        """Test that items without a file still get a descriptor."""
        descriptor = build_embed_descriptor("https://lms.example.com", 1, 5, "")

        assert "%2F5%2F" in descriptor.embed_url


class TestGetEmbed:
    """Tests for H5PContentService.get_embed."""

    @pytest.mark.asyncio
    async def test_matches_upload(self, service, context, payload) -> None:
        """Test that get_embed returns the embed URL computed at upload."""
        uploaded = await service.upload(context, payload, filename="demo.h5p")

        result = await service.get_embed(context, uploaded.item.id)

        assert result.embed.embed_url == uploaded.embed.embed_url
        assert result.embed.iframe_html == uploaded.embed.iframe_html
        assert result.embed.short_code == f"{{h5p:{uploaded.item.id}}}"
        assert result.item.name == "demo"

    @pytest.mark.asyncio
    async def test_unknown_content(self, service, context) -> None:
        """Test that an unknown id fails with ContentNotFound."""
        with pytest.raises(ContentNotFoundError) as exc_info:
            await service.get_embed(context, 999)

        assert exc_info.value.content_id == 999

    @pytest.mark.asyncio
    async def test_requires_access(self, service, context, payload) -> None:
        """Test that the access capability is checked in the item's scope."""
        uploaded = await service.upload(context, payload, filename="demo.h5p")
        stranger = RequestContext(principal_id="stranger", base_url=context.base_url)

        with pytest.raises(AuthorizationDeniedError):
            await service.get_embed(stranger, uploaded.item.id)

    @pytest.mark.asyncio
    async def test_uses_request_base_url(self, service, context, payload) -> None:
        """Test that the embed URL follows the caller's base URL."""
        uploaded = await service.upload(context, payload, filename="demo.h5p")
        other = RequestContext(principal_id=context.principal_id, base_url="https://mirror.example.org")

        result = await service.get_embed(other, uploaded.item.id)

        assert result.embed.embed_url.startswith("https://mirror.example.org/embed?url=")


class TestList:
    """Tests for H5PContentService.list."""

    @pytest.mark.asyncio
    async def test_count_matches_uploads(self, service, context, payload) -> None:
        """Test that N uploads into a scope list N distinct items."""
        ids = []
        for n in range(3):
            result = await service.upload(context, payload, filename=f"quiz{n}.h5p")
            ids.append(result.item.id)

        listing = await service.list(context)

        assert listing.count == 3
        assert sorted(s.content_id for s in listing.items) == sorted(ids)

    @pytest.mark.asyncio
    async def test_empty_scope(self, service, repository, context) -> None:
        """Test that a scope without items lists nothing."""
        repository.add_scope(scope_id=7, collection_id=70)

        listing = await service.list(context, scope_id=7)

        assert listing.count == 0
        assert listing.items == ()

    @pytest.mark.asyncio
    async def test_only_scope_items(self, service, course_scope, context, payload) -> None:
        """Test that listing is restricted to the requested scope."""
        await service.upload(context, payload, filename="system.h5p")
        course_item = await service.upload(
            context, payload, filename="course.h5p", scope_id=course_scope.id
        )

        listing = await service.list(context, collection_id=course_scope.collection_id)

        assert [s.content_id for s in listing.items] == [course_item.item.id]

    @pytest.mark.asyncio
    async def test_summary_fields(self, service, context, payload) -> None:
        """Test the fields of a listed item."""
        uploaded = await service.upload(context, payload, filename="demo.h5p", title="Demo")

        summary = (await service.list(context)).items[0]

        assert summary.content_id == uploaded.item.id
        assert summary.name == "Demo"
        assert summary.scope_id == 1
        assert summary.filename == "demo.h5p"
        assert summary.embed_url == uploaded.embed.embed_url
        assert isinstance(summary.created_at, int)
        assert summary.modified_at >= summary.created_at > 0

    @pytest.mark.asyncio
    async def test_unknown_scope(self, service, context) -> None:
        with pytest.raises(ScopeNotFoundError):
            await service.list(context, scope_id=404)

    @pytest.mark.asyncio
    async def test_requires_access(self, service, context) -> None:
        stranger = RequestContext(principal_id="stranger", base_url=context.base_url)

        with pytest.raises(AuthorizationDeniedError):
            await service.list(stranger)


class TestPublicFile:
    """Tests for H5PContentService.get_public_file."""

    @pytest.mark.asyncio
    async def test_returns_stored_package(self, service, context, payload) -> None:
        uploaded = await service.upload(context, payload, filename="demo.h5p")

        stored, mime_type = await service.get_public_file(1, uploaded.item.id, "demo.h5p")

        assert stored.data == b"Hello"
        assert mime_type == "application/zip"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("scope_id", "filename"), [(2, "demo.h5p"), (1, "other.h5p")])
    async def test_mismatched_url(self, service, context, payload, scope_id, filename) -> None:
        """Test that URL parts must match the stored item."""
        uploaded = await service.upload(context, payload, filename="demo.h5p")

        with pytest.raises(ContentNotFoundError):
            await service.get_public_file(scope_id, uploaded.item.id, filename)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request and response schemas for the H5P content bank endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from h5p_api.services.h5p.models import (
    ContentItemSummary,
    EmbedResult,
    ListResult,
    UploadResult,
)


class UploadRequest(BaseModel):
    """Request to upload an H5P package."""

    payload_base64: str = Field(
        description="Base64 encoded H5P package.",
    )
    filename: str = Field(
        default="content.h5p",
        description="Filename for the stored package.",
    )
    title: str = Field(
        default="",
        description="Display name. Derived from the filename when empty.",
    )
    scope_id: int = Field(
        default=0,
        ge=0,
        description="Target scope id (0 = not given).",
    )
    collection_id: int = Field(
        default=0,
        ge=0,
        description="Target collection id (0 = not given).",
    )


class UploadResponse(BaseModel):
    """Outcome of a successful upload."""

    success: Literal[True] = True
    content_id: int = Field(description="New content item id.")
    name: str = Field(description="Display name of the item.")
    scope_id: int = Field(description="Scope the item was stored in.")
    embed_url: str = Field(description="URL of the embeddable player.")
    iframe_html: str = Field(description="Ready-to-use iframe markup.")

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResponse":
        return cls(
            content_id=result.item.id,
            name=result.item.name,
            scope_id=result.scope.id,
            embed_url=result.embed.embed_url,
            iframe_html=result.embed.iframe_html,
        )


class ContentSummaryResponse(BaseModel):
    """One listed content item."""

    content_id: int
    name: str
    scope_id: int
    created_at: int = Field(description="Unix timestamp in seconds.")
    modified_at: int = Field(description="Unix timestamp in seconds.")
    filename: str
    embed_url: str

    @classmethod
    def from_summary(cls, summary: ContentItemSummary) -> "ContentSummaryResponse":
        return cls(
            content_id=summary.content_id,
            name=summary.name,
            scope_id=summary.scope_id,
            created_at=summary.created_at,
            modified_at=summary.modified_at,
            filename=summary.filename,
            embed_url=summary.embed_url,
        )


class ListResponse(BaseModel):
    """Content items of a scope."""

    success: Literal[True] = True
    count: int = Field(description="Number of items, equal to len(items).")
    items: list[ContentSummaryResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ListResult) -> "ListResponse":
        return cls(
            count=result.count,
            items=[ContentSummaryResponse.from_summary(s) for s in result.items],
        )


class EmbedResponse(BaseModel):
    """Embed identity of an existing item."""

    success: Literal[True] = True
    content_id: int
    name: str
    embed_url: str
    iframe_html: str
    short_code: str = Field(description="Filter short-code, e.g. {h5p:42}.")

    @classmethod
    def from_result(cls, result: EmbedResult) -> "EmbedResponse":
        return cls(
            content_id=result.item.id,
            name=result.item.name,
            embed_url=result.embed.embed_url,
            iframe_html=result.embed.iframe_html,
            short_code=result.embed.short_code,
        )


class FunctionInfo(BaseModel):
    """A remote-callable function."""

    name: str
    description: str
    type: Literal["read", "write"]
    capability: str


class FunctionsResponse(BaseModel):
    """Function catalogue of the service."""

    service: str
    shortname: str
    functions: list[FunctionInfo]
    content_types: list[dict[str, Any]] = Field(default_factory=list)


class ErrorBody(BaseModel):
    """Structured failure details."""

    kind: str = Field(description="Machine-stable error identifier.")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Failure envelope returned for every content bank error."""

    success: Literal[False] = False
    error: ErrorBody

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""H5P Content Bank Service.

This package provides the content bank operations:
- H5PContentService: upload, list and get_embed entry points
- ScopeResolver: maps scope descriptors to scopes
- Uploader: staged ingestion through content-type handlers
- Lister: per-scope summaries with embed URLs
- EmbedResolver: embed URL, iframe markup and short-code
- StagingArea: principal-scoped transient storage for uploads

Usage:
    from h5p_api.services.h5p import H5PContentService, RequestContext

    context = RequestContext(principal_id="user-7", base_url="https://lms.example.com")
    result = await service.upload(context, payload_base64=data, filename="quiz.h5p")
    print(result.embed.embed_url)
"""

from h5p_api.services.h5p.embed import EmbedResolver, build_embed_descriptor
from h5p_api.services.h5p.exceptions import (
    AuthorizationDeniedError,
    ContentNotFoundError,
    ContentTypeUnavailableError,
    ErrorKind,
    H5PError,
    IngestionFailedError,
    InvalidPayloadError,
    ScopeNotFoundError,
)
from h5p_api.services.h5p.handlers import (
    BaseContentTypeHandler,
    ContentTypeRegistry,
    H5PContentTypeHandler,
)
from h5p_api.services.h5p.lister import Lister
from h5p_api.services.h5p.models import (
    Capability,
    ContentItem,
    ContentKind,
    EmbedDescriptor,
    RequestContext,
    Scope,
    ScopeKind,
)
from h5p_api.services.h5p.scope import ScopeResolver
from h5p_api.services.h5p.service import H5PContentService
from h5p_api.services.h5p.staging import StagingArea
from h5p_api.services.h5p.uploader import Uploader, validate_upload

__all__ = [
    "H5PContentService",
    "ScopeResolver",
    "Uploader",
    "Lister",
    "EmbedResolver",
    "StagingArea",
    "build_embed_descriptor",
    "validate_upload",
    "BaseContentTypeHandler",
    "ContentTypeRegistry",
    "H5PContentTypeHandler",
    "Capability",
    "ContentItem",
    "ContentKind",
    "EmbedDescriptor",
    "RequestContext",
    "Scope",
    "ScopeKind",
    "ErrorKind",
    "H5PError",
    "InvalidPayloadError",
    "ScopeNotFoundError",
    "ContentTypeUnavailableError",
    "IngestionFailedError",
    "ContentNotFoundError",
    "AuthorizationDeniedError",
]

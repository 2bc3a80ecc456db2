# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content-type handlers.

The handler system follows a registry pattern:
1. BaseContentTypeHandler: Abstract base class defining the ingestion flow
2. ContentTypeRegistry: Exact-key registry from ContentKind to handler
3. H5PContentTypeHandler: Handler for H5P packages
"""

from h5p_api.services.h5p.handlers.base import BaseContentTypeHandler
from h5p_api.services.h5p.handlers.h5p import H5PContentTypeHandler
from h5p_api.services.h5p.handlers.registry import ContentTypeRegistry

__all__ = [
    "BaseContentTypeHandler",
    "ContentTypeRegistry",
    "H5PContentTypeHandler",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""H5P content-type handler.

H5P packages are stored as uploaded; the package format itself is
interpreted by the player, not by the content bank.
"""

from h5p_api.services.h5p.handlers.base import BaseContentTypeHandler
from h5p_api.services.h5p.models import ContentKind


class H5PContentTypeHandler(BaseContentTypeHandler):
    """Ingests .h5p packages into the content bank."""

    @property
    def kind(self) -> ContentKind:
        return ContentKind.H5P

    @property
    def display_name(self) -> str:
        return "H5P"

    @property
    def mime_type(self) -> str:
        # .h5p files are zip archives
        return "application/zip"

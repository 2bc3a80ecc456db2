# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

Modules:
    h5p: H5P content bank endpoints (upload, list, embed, functions).
    schemas: Request and response models.
"""

from fastapi import APIRouter

from h5p_api.api.v1 import h5p

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(h5p.router, prefix="/h5p", tags=["H5P Content Bank"])

__all__ = ["router"]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the H5P Content Bank API.

Example:
    >>> from h5p_api.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from h5p_api.core.config.settings import (
    APISettings,
    DatabaseSettings,
    H5PSettings,
    RedisSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "APISettings",
    "DatabaseSettings",
    "RedisSettings",
    "H5PSettings",
]

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unversioned routes: health checks and public file delivery."""

from h5p_api.api.routes import health, pluginfile

__all__ = ["health", "pluginfile"]

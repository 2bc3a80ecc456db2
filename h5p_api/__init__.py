"""H5P Content Bank API.

Remote-callable operations for uploading H5P packages into a content bank,
listing them per scope, and resolving ready-to-embed URLs and markup.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

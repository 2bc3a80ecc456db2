# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the content bank."""

from h5p_api.infrastructure.database.connection import (
    SYSTEM_SCOPE_ID,
    DatabaseError,
    check_database_connection,
    close_database,
    create_schema,
    get_engine,
    get_session,
    get_sessionmaker,
    init_database,
)
from h5p_api.infrastructure.database.models import (
    Base,
    CapabilityGrantRecord,
    ContentFileRecord,
    ContentItemRecord,
    ContentTypeSettingRecord,
    ScopeRecord,
)
from h5p_api.infrastructure.database.repository import SqlContentRepository

__all__ = [
    "SYSTEM_SCOPE_ID",
    "Base",
    "CapabilityGrantRecord",
    "ContentFileRecord",
    "ContentItemRecord",
    "ContentTypeSettingRecord",
    "DatabaseError",
    "ScopeRecord",
    "SqlContentRepository",
    "check_database_connection",
    "close_database",
    "create_schema",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_database",
]

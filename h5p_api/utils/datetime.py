# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All datetimes handled by the service are timezone-aware UTC. Content
timestamps cross the wire as integer Unix timestamps.

Usage:
    from h5p_api.utils.datetime import utc_now, to_timestamp

    created_at = utc_now()
    wire_value = to_timestamp(created_at)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Naive datetimes are assumed to already be UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_timestamp(dt: datetime | None) -> int:
    """Convert a datetime to integer Unix seconds.

    Args:
        dt: Datetime to convert. None maps to 0.

    Returns:
        Seconds since epoch.
    """
    aware = ensure_utc(dt)
    if aware is None:
        return 0
    return int(aware.timestamp())

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Staging area for uploads that are being ingested.

An upload is held here between decoding and the moment a content item
exists, so a half-ingested upload never shows up as a permanent item.
Blobs are keyed by (principal, random token); two principals can never
address the same blob.

Blobs are stored in Redis with an expiry when a client is provided, and
in process memory otherwise (development and tests).
"""

import base64
import logging
from uuid import uuid4

from h5p_api.infrastructure.cache import RedisClient
from h5p_api.services.h5p.exceptions import IngestionFailedError
from h5p_api.services.h5p.models import StagedBlob

logger = logging.getLogger(__name__)

# Redis key prefix for staged uploads (after the principal prefix)
STAGING_KEY_PREFIX = "h5p_staging"
# Default expiration for staged uploads (1 hour)
STAGING_EXPIRE_SECONDS = 60 * 60


class StagingArea:
    """Principal-scoped transient storage for uploads.

    Usage:
        staging = StagingArea(redis=get_redis())

        blob = await staging.stage(data, owner_id="user-7", filename="quiz.h5p")
        data = await staging.read(blob)
        await staging.release(blob)
    """

    def __init__(
        self,
        redis: RedisClient | None = None,
        expire_seconds: int = STAGING_EXPIRE_SECONDS,
    ):
        """Initialize the staging area.

        Args:
            redis: Redis client. None keeps blobs in process memory.
            expire_seconds: Expiry applied to blobs stored in Redis.
        """
        self._redis = redis
        self._expire_seconds = expire_seconds
        self._memory_storage: dict[tuple[str, str], bytes] = {}

    def _blob_key(self, token: str) -> str:
        """Build the key of a staged blob within its owner's namespace."""
        return f"{STAGING_KEY_PREFIX}:{token}"

    async def stage(self, data: bytes, owner_id: str, filename: str) -> StagedBlob:
        """Store bytes under a fresh random token.

        Args:
            data: Decoded upload.
            owner_id: Principal the upload belongs to.
            filename: Sanitized upload filename.

        Returns:
            Handle to the staged blob.
        """
        blob = StagedBlob(
            token=uuid4().hex,
            owner_id=owner_id,
            filename=filename,
            size=len(data),
        )

        if self._redis is not None:
            await self._redis.set_with_owner(
                owner_id,
                self._blob_key(blob.token),
                {
                    "filename": filename,
                    "size": blob.size,
                    "data": base64.b64encode(data).decode("ascii"),
                    "staged_at": blob.created_at.isoformat(),
                },
                expire_seconds=self._expire_seconds,
            )
        else:
            self._memory_storage[(owner_id, blob.token)] = data

        logger.debug(
            "Staged upload: owner=%s, token=%s, size=%d",
            owner_id,
            blob.token,
            blob.size,
        )
        return blob

    async def read(self, blob: StagedBlob) -> bytes:
        """Read back the bytes of a staged blob.

        Args:
            blob: Handle returned by stage().

        Returns:
            The staged bytes.

        Raises:
            IngestionFailedError: If the blob expired or was released.
        """
        if self._redis is not None:
            record = await self._redis.get_with_owner(blob.owner_id, self._blob_key(blob.token))
            if record:
                return base64.b64decode(record["data"])
        else:
            data = self._memory_storage.get((blob.owner_id, blob.token))
            if data is not None:
                return data

        raise IngestionFailedError(
            "Staged upload is no longer available",
            details={"token": blob.token},
        )

    async def release(self, blob: StagedBlob) -> bool:
        """Delete a staged blob.

        Args:
            blob: Handle returned by stage().

        Returns:
            True if a blob was deleted, False if it was already gone.
        """
        if self._redis is not None:
            deleted = await self._redis.delete_with_owner(blob.owner_id, self._blob_key(blob.token))
        else:
            deleted = self._memory_storage.pop((blob.owner_id, blob.token), None) is not None

        logger.debug("Released staged upload: owner=%s, token=%s", blob.owner_id, blob.token)
        return deleted

    def __len__(self) -> int:
        """Number of blobs held in process memory."""
        return len(self._memory_storage)

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cache infrastructure using Redis.

Principal isolation is achieved via key prefixes: principal:{principal_id}:*

Example:
    from h5p_api.infrastructure.cache import init_redis, get_redis

    await init_redis(settings)
    redis = get_redis()
    await close_redis()
"""

from h5p_api.infrastructure.cache.redis_client import (
    RedisClient,
    RedisError,
    close_redis,
    get_redis,
    init_redis,
)

__all__ = [
    "RedisClient",
    "RedisError",
    "close_redis",
    "get_redis",
    "init_redis",
]

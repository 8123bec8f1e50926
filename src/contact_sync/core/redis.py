"""Redis connection pool for contact storage.

The client is created lazily on first use and shared by every RedisContactStore
built from it. Keys are namespaced by the configured REDIS_KEY_PREFIX in the
store itself, not here.
"""

from __future__ import annotations

import redis.asyncio as aioredis
import structlog

from src.contact_sync.config import get_settings

logger = structlog.get_logger(__name__)

# ── Module-level Redis pool (lazy init) ─────────────────────────────────────

_redis_pool: aioredis.Redis | None = None


def get_redis_pool() -> aioredis.Redis:
    """Get or create the Redis connection pool singleton."""
    global _redis_pool
    if _redis_pool is None:
        settings = get_settings()
        _redis_pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool. Safe to call repeatedly."""
    global _redis_pool
    if _redis_pool:
        pool, _redis_pool = _redis_pool, None
        await pool.aclose()
        logger.info("redis.closed")

"""Redis-backed revocation list for session tokens."""

from __future__ import annotations

import redis.asyncio as redis

from app.core.config import get_settings

settings = get_settings()

_redis_pool: redis.Redis | None = None

REVOKED_KEY_PREFIX = "session:revoked:"


async def get_redis() -> redis.Redis:
    """Get or create the Redis connection."""
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.from_url(
            settings.redis_url,
            decode_responses=True,
        )
    return _redis_pool


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.aclose()
        _redis_pool = None


async def revoke_session(jti: str, ttl_seconds: int | None = None) -> None:
    """Add a session token ID to the revocation list (TTL defaults to the session lifetime)."""
    ttl = ttl_seconds if ttl_seconds is not None else settings.jwt_expire_minutes * 60
    client = await get_redis()
    await client.setex(f"{REVOKED_KEY_PREFIX}{jti}", ttl, "1")


async def is_session_revoked(jti: str) -> bool:
    """Check if a session token ID has been revoked."""
    client = await get_redis()
    return await client.exists(f"{REVOKED_KEY_PREFIX}{jti}") > 0

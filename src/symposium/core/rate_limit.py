"""
Rate Limiting Module

Sliding-window rate limiting backed by Redis, with an in-memory fallback when
Redis is unavailable.

Applied to endpoints that send email (verification resend, email change,
signature invitations) to prevent email bombing.
"""

import logging
import time

from fastapi import HTTPException, status
from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}
# Format: {key: expires_at}, mirrors the Redis key TTL
_memory_expiry: dict[str, float] = {}


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using Redis sorted sets.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using process memory.

    Does not coordinate across multiple server instances.
    """
    now = time.time()
    window_start = now - window_seconds
    _evict_expired(now)

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]
    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    _memory_expiry[key] = now + window_seconds
    return True


def _evict_expired(now: float) -> None:
    """Drop keys whose window has fully elapsed."""
    expired = [key for key, expires_at in _memory_expiry.items() if expires_at <= now]
    for key in expired:
        _memory_expiry.pop(key, None)
        _memory_store.pop(key, None)


async def check_rate_limit(
    redis: Redis | None,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        redis: Redis client, or None when unavailable
        key: Unique key for this rate limit (e.g., "invite:statement:<student_id>")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    if redis is not None:
        try:
            return await _check_rate_limit_redis(redis, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def enforce_rate_limit(
    redis: Redis | None,
    key: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Raise RateLimitExceeded when the key is over its limit.
    """
    allowed = await check_rate_limit(redis, key, limit, window_seconds)
    if not allowed:
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window_seconds}s")
        raise RateLimitExceeded(limit, window_seconds)


def reset_memory_store() -> None:
    """Clear in-memory counters."""
    _memory_store.clear()
    _memory_expiry.clear()


__all__ = [
    "check_rate_limit",
    "enforce_rate_limit",
    "reset_memory_store",
    "RateLimitExceeded",
]

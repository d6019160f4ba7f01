"""
Redis Configuration

Async Redis client used for rate limiting.
"""

from redis.asyncio import Redis, from_url


async def init_redis(redis_url: str) -> Redis:
    """
    Open a Redis connection and verify it responds.

    Call this on application startup.
    """
    client = from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    # Test connection
    await client.ping()
    return client


async def close_redis(client: Redis | None) -> None:
    """Close Redis connection."""
    if client:
        await client.aclose()

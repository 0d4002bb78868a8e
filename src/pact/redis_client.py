"""Process-wide async Redis client, created in the app lifespan."""

from __future__ import annotations

import logging

import redis.asyncio as redis

logger = logging.getLogger(__name__)

_client: redis.Redis | None = None


async def init_redis(url: str) -> None:
    """Create the Redis client. Connections are opened lazily on first use."""
    global _client  # noqa: PLW0603
    _client = redis.from_url(url, decode_responses=True)
    logger.info("Redis client configured for %s", url)


async def close_redis() -> None:
    """Close the Redis client."""
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.aclose()
        _client = None


def get_redis() -> redis.Redis:
    """Get the Redis client instance."""
    if _client is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _client

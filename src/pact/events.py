"""Realtime event publishing.

Services never touch the Redis client directly. They receive an
``EventPublisher`` (``publish(topic, payload)``) through the request's
dependencies, so the fan-out target can be swapped out in tests.

Channel conventions:
  pubsub:<event>   broadcast events for feeds and overlays
  ws:user:<id>     per-user messages routed to that user's sockets
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator
from typing import Any, Protocol

from pact.redis_client import get_redis

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    async def publish(self, topic: str, payload: dict[str, Any]) -> None: ...


def user_channel(user_id: int) -> str:
    """Per-user channel name."""
    return f"ws:user:{user_id}"


def broadcast_channel(event: str) -> str:
    """Broadcast channel name for an event type."""
    return f"pubsub:{event}"


class RedisEventPublisher:
    """Publishes JSON payloads over Redis pub/sub.

    Delivery is best effort: a failed publish is logged and dropped, the
    database state the event describes is already committed.
    """

    def __init__(self, redis: Any) -> None:  # noqa: ANN401
        self._redis = redis

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        try:
            await self._redis.publish(topic, json.dumps(payload, default=str))
        except Exception:
            logger.warning("Failed to publish event on %s", topic, exc_info=True)


class NullEventPublisher:
    """Drops every event. Used when Redis is not configured."""

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        logger.debug("Dropping event on %s (no publisher configured)", topic)


async def get_publisher() -> AsyncGenerator[EventPublisher, None]:
    """Yield the request's event publisher (FastAPI dependency)."""
    try:
        redis = get_redis()
    except RuntimeError:
        yield NullEventPublisher()
        return
    yield RedisEventPublisher(redis)

"""Event publisher tests: JSON encoding, failure handling, dependency fallback."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from pact.events import (
    NullEventPublisher,
    RedisEventPublisher,
    broadcast_channel,
    get_publisher,
    user_channel,
)


class TestChannels:
    def test_user_channel(self):
        assert user_channel(42) == "ws:user:42"

    def test_broadcast_channel(self):
        assert broadcast_channel("goal_completed") == "pubsub:goal_completed"


class TestRedisEventPublisher:
    """Test publishing through a Redis client."""

    @pytest.mark.asyncio
    async def test_publishes_json(self):
        redis = AsyncMock()
        await RedisEventPublisher(redis).publish("pubsub:goal_completed", {"user_id": 1, "new_streak": 7})

        redis.publish.assert_awaited_once()
        topic, raw = redis.publish.await_args.args
        assert topic == "pubsub:goal_completed"
        assert json.loads(raw) == {"user_id": 1, "new_streak": 7}

    @pytest.mark.asyncio
    async def test_publish_failure_is_swallowed(self):
        redis = AsyncMock()
        redis.publish.side_effect = ConnectionError("redis down")
        await RedisEventPublisher(redis).publish("ws:user:1", {"event": "notification"})
        redis.publish.assert_awaited_once()


class TestGetPublisher:
    """Test the FastAPI dependency."""

    @pytest.mark.asyncio
    async def test_falls_back_to_null_without_redis(self, monkeypatch):
        import pact.redis_client as redis_client

        monkeypatch.setattr(redis_client, "_client", None)
        gen = get_publisher()
        publisher = await gen.__anext__()
        assert isinstance(publisher, NullEventPublisher)
        await publisher.publish("pubsub:x", {})

    @pytest.mark.asyncio
    async def test_uses_redis_when_configured(self, monkeypatch):
        import pact.redis_client as redis_client

        fake = AsyncMock()
        monkeypatch.setattr(redis_client, "_client", fake)
        gen = get_publisher()
        publisher = await gen.__anext__()
        assert isinstance(publisher, RedisEventPublisher)
        await publisher.publish("pubsub:x", {"a": 1})
        fake.publish.assert_awaited_once()

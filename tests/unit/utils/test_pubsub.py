"""Unit tests for PubSubService and Subscription."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from attendance.utils.pubsub import PubSubService, Subscription


def make_pubsub(messages) -> MagicMock:
    """Mock redis PubSub whose listen() replays messages."""
    pubsub = MagicMock()
    pubsub.subscribe = AsyncMock()
    pubsub.unsubscribe = AsyncMock()
    pubsub.aclose = AsyncMock()

    async def listen():
        for message in messages:
            yield message

    pubsub.listen = listen
    return pubsub


class TestPubSubService:
    """Tests for PubSubService."""

    @pytest.mark.asyncio
    async def test_publish_serializes_json(self):
        redis = MagicMock()
        redis.publish = AsyncMock(return_value=2)

        receivers = await PubSubService(redis).publish("chan", {"a": 1})

        assert receivers == 2
        redis.publish.assert_awaited_once_with("chan", json.dumps({"a": 1}))

    @pytest.mark.asyncio
    async def test_open_subscribes_before_returning(self):
        pubsub = make_pubsub([])
        redis = MagicMock()
        redis.pubsub.return_value = pubsub

        subscription = await PubSubService(redis).open("chan")

        pubsub.subscribe.assert_awaited_once_with("chan")
        assert subscription.channel == "chan"


class TestSubscription:
    """Tests for Subscription iteration and teardown."""

    @pytest.mark.asyncio
    async def test_yields_only_messages(self):
        pubsub = make_pubsub(
            [
                {"type": "subscribe", "data": 1},
                {"type": "message", "data": json.dumps({"n": 1})},
                {"type": "message", "data": json.dumps({"n": 2})},
            ]
        )

        payloads = [p async for p in Subscription(pubsub, "chan")]

        assert payloads == [{"n": 1}, {"n": 2}]

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        pubsub = make_pubsub([])
        subscription = Subscription(pubsub, "chan")

        await subscription.close()
        await subscription.close()

        assert subscription.closed is True
        pubsub.unsubscribe.assert_awaited_once_with("chan")
        pubsub.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_context_manager_closes(self):
        pubsub = make_pubsub([])

        async with Subscription(pubsub, "chan") as subscription:
            assert subscription.closed is False

        assert subscription.closed is True

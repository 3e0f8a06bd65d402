"""Redis pub/sub service for real-time messaging."""

import json
import logging
from typing import Any, AsyncIterator

from redis.asyncio import Redis
from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)


class Subscription:
    """Open subscription to one channel.

    The channel is already subscribed when this object exists, so nothing
    published after ``PubSubService.open`` returns is missed. Iterating
    yields decoded JSON payloads; ``close`` unsubscribes and is idempotent.
    """

    def __init__(self, pubsub: PubSub, channel: str) -> None:
        self._pubsub = pubsub
        self.channel = channel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        async for message in self._pubsub.listen():
            if self._closed:
                break
            if message["type"] == "message":
                yield json.loads(message["data"])

    async def close(self) -> None:
        """Unsubscribe from the channel and release the connection."""
        if self._closed:
            return
        self._closed = True
        await self._pubsub.unsubscribe(self.channel)
        await self._pubsub.aclose()
        logger.debug("Unsubscribed from channel", extra={"channel": self.channel})

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class PubSubService:
    """Redis pub/sub service for publishing and subscribing to channels.

    Provides a clean interface for Redis pub/sub operations with automatic
    JSON serialization/deserialization.
    """

    def __init__(self, redis: Redis) -> None:
        """Initialize PubSubService with Redis client.

        Args:
            redis: Async Redis client instance.
        """
        self._redis = redis

    async def publish(self, channel: str, data: dict[str, Any]) -> int:
        """Publish data to a Redis channel.

        Args:
            channel: Channel name to publish to.
            data: Dictionary data to publish (will be JSON serialized).

        Returns:
            Number of subscribers that received the message.
        """
        receivers = await self._redis.publish(channel, json.dumps(data))
        logger.debug(
            "Published message to channel",
            extra={"channel": channel, "receivers": receivers},
        )
        return receivers

    async def open(self, channel: str) -> Subscription:
        """Subscribe to a Redis channel.

        Args:
            channel: Channel name to subscribe to.

        Returns:
            Subscription yielding dictionaries from published messages.
        """
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(channel)
        logger.debug("Subscribed to channel", extra={"channel": channel})
        return Subscription(pubsub, channel)

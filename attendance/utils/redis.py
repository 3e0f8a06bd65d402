"""Redis client lifecycle and key naming.

One client serves both the live subject feed (pub/sub) and the per-identity
error notices (plain keys). Every key and channel lives under ``KEY_PREFIX``.
"""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from attendance.config import get_settings
from attendance.exceptions import RedisConnectionError

logger = logging.getLogger(__name__)

KEY_PREFIX = "attendance"

# Seconds; keeps idle pub/sub connections from being silently dropped
HEALTH_CHECK_INTERVAL = 30
CONNECT_TIMEOUT = 5


def make_key(*parts: object) -> str:
    """Build a namespaced Redis key or channel name.

    Example:
        make_key("subjects", user_id) -> "attendance:subjects:<user_id>"
    """
    return ":".join([KEY_PREFIX, *(str(part) for part in parts)])


class RedisManager:
    """Owns the shared Redis client.

    ``connect`` builds the client on first call; ``client`` refuses to hand
    out a client that was never connected, so a failed startup surfaces as
    RedisConnectionError instead of a lazily created dead client.
    """

    def __init__(self) -> None:
        self._client: Optional[Redis] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Redis:
        """Connected client.

        Raises:
            RedisConnectionError: If ``connect`` has not been called.
        """
        if self._client is None:
            raise RedisConnectionError("Redis client is not initialized")
        return self._client

    def connect(self) -> Redis:
        """Create the client from settings, once."""
        if self._client is None:
            settings = get_settings()
            self._client = Redis.from_url(
                settings.redis_url,
                decode_responses=True,
                health_check_interval=HEALTH_CHECK_INTERVAL,
                socket_connect_timeout=CONNECT_TIMEOUT,
            )
            logger.info(
                "Redis client created",
                extra={"host": settings.redis_host, "db": settings.redis_db},
            )
        return self._client

    async def verify_connection(self) -> bool:
        """PING the server.

        Raises:
            RedisConnectionError: If the server cannot be reached.
        """
        try:
            await self.connect().ping()
        except (RedisError, OSError) as e:
            logger.error(f"Redis ping failed: {e}")
            raise RedisConnectionError(f"Failed to connect to Redis: {e}") from e
        return True

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        await client.aclose()
        logger.info("Redis client closed")


redis_manager = RedisManager()


async def init_redis() -> None:
    """Connect to Redis and check it answers.

    Raises:
        RedisConnectionError: If Redis is unreachable.
    """
    redis_manager.connect()
    await redis_manager.verify_connection()
    logger.info("Redis ready")


def get_redis_client() -> Redis:
    """Shared client for services.

    Raises:
        RedisConnectionError: If Redis was never initialized.
    """
    return redis_manager.client


async def close_redis() -> None:
    await redis_manager.close()

"""Single user-facing error message per identity, stored in Redis."""

import logging
from typing import Optional

from redis.asyncio import Redis

from attendance.utils.redis import make_key

logger = logging.getLogger(__name__)


class ErrorNotice:
    """Holds the last error message shown to an identity.

    Only one message exists at a time: setting a new one replaces the old.
    Messages expire after ``ttl`` seconds.
    """

    KEY = "error"

    def __init__(self, redis: Redis, ttl: int = 3600) -> None:
        self._redis = redis
        self._ttl = ttl

    @classmethod
    def key_for(cls, user_id: str) -> str:
        return make_key(cls.KEY, user_id)

    async def set(self, user_id: str, message: str) -> None:
        await self._redis.setex(self.key_for(user_id), self._ttl, message)
        logger.debug("Error notice set", extra={"user_id": user_id})

    async def get(self, user_id: str) -> Optional[str]:
        return await self._redis.get(self.key_for(user_id)) or None

    async def clear(self, user_id: str) -> None:
        await self._redis.delete(self.key_for(user_id))

"""Real-time subject snapshots via Redis pub/sub.

Every write publishes the full, ordered subject collection of the affected
identity; subscribers replace their view with each message instead of
patching it.
"""

import logging
from typing import Any, Iterable

from attendance.core.summary import SubjectRecord
from attendance.utils.pubsub import PubSubService, Subscription
from attendance.utils.redis import make_key

logger = logging.getLogger(__name__)


class SubjectFeed:
    """Publishes and subscribes to per-identity subject snapshots.

    Attributes:
        CHANNEL: Channel segment placed between the key prefix and the identity.
    """

    CHANNEL = "subjects"

    def __init__(self, pubsub: PubSubService) -> None:
        self._pubsub = pubsub

    @classmethod
    def channel_for(cls, user_id: str) -> str:
        return make_key(cls.CHANNEL, user_id)

    @staticmethod
    def encode(records: Iterable[SubjectRecord]) -> dict[str, Any]:
        return {"subjects": [record.to_dict() for record in records]}

    @staticmethod
    def decode(payload: dict[str, Any]) -> list[SubjectRecord]:
        return [SubjectRecord.from_source(item) for item in payload.get("subjects", [])]

    async def publish(self, user_id: str, records: Iterable[SubjectRecord]) -> None:
        """Push the full snapshot to every subscriber of the identity.

        Args:
            user_id: Identity whose collection changed.
            records: Complete current collection, in display order.
        """
        records = list(records)
        await self._pubsub.publish(self.channel_for(user_id), self.encode(records))
        logger.debug(
            "Subject snapshot published",
            extra={"user_id": user_id, "count": len(records)},
        )

    async def open(self, user_id: str) -> Subscription:
        """Subscribe to the identity's snapshots.

        Returns:
            Subscription yielding raw payloads; decode them with ``decode``.
        """
        return await self._pubsub.open(self.channel_for(user_id))

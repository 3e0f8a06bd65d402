"""Subject store adapter.

The only stateful component: mediates create/update/delete against the
database and keeps subscribers supplied with the complete current snapshot.
Writes do not return the new collection; it arrives through ``subscribe``.
"""

import logging
import re
from typing import Any, AsyncIterator, Optional

from redis.exceptions import RedisError

from attendance.core.summary import SubjectRecord, sort_records
from attendance.exceptions import SubscriptionError
from attendance.services.subject_feed import SubjectFeed
from attendance.services.subject_service import SubjectService
from attendance.utils.pubsub import Subscription

logger = logging.getLogger(__name__)

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


def parse_count(value: Any) -> Optional[int]:
    """Parse a user-entered count.

    Leading digits are taken, so "12" and "12 classes" both give 12.

    Returns:
        Non-negative integer, or None if the input has no usable count.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        count = value
    else:
        match = _LEADING_INTEGER.match(str(value))
        if match is None:
            return None
        count = int(match.group(1))
    return count if count >= 0 else None


class SnapshotStream:
    """Async iterator over full subject snapshots.

    Yields the snapshot loaded at subscription time first, then one snapshot
    per pushed change. Leaving the iteration, or calling ``close``, tears
    the subscription down.
    """

    def __init__(self, initial: list[SubjectRecord], subscription: Subscription) -> None:
        self.initial = initial
        self._subscription = subscription

    async def __aiter__(self) -> AsyncIterator[list[SubjectRecord]]:
        try:
            yield self.initial
            async for payload in self._subscription:
                yield SubjectFeed.decode(payload)
        finally:
            await self.close()

    async def close(self) -> None:
        await self._subscription.close()


class SubjectStore:
    """Identity-scoped subject operations with snapshot publication.

    Usage:
        store = SubjectStore(SubjectService(db), SubjectFeed(PubSubService(redis)))
        stream = await store.subscribe(user_id)
        subject_id = await store.create(user_id, "Physics", "Lecture")
        async for snapshot in stream:
            ...
    """

    def __init__(self, service: SubjectService, feed: SubjectFeed) -> None:
        self._service = service
        self._feed = feed

    async def snapshot(self, user_id: str) -> list[SubjectRecord]:
        """Load the identity's subjects ordered by name."""
        return sort_records(await self._service.list_subjects(user_id))

    async def subscribe(self, user_id: str) -> SnapshotStream:
        """Open a snapshot stream for the identity.

        The channel is subscribed before the initial snapshot is read, so
        a write landing in between is delivered as the next push. The
        database connection is released once the snapshot is loaded; only
        the subscription stays open for the life of the stream.

        Raises:
            SubscriptionError: If the channel cannot be subscribed.
            DatabaseConnectionError: If the initial snapshot cannot be loaded.
        """
        try:
            subscription = await self._feed.open(user_id)
        except RedisError as e:
            logger.error(
                "Failed to subscribe to subject feed",
                extra={"user_id": user_id, "error": str(e)},
            )
            raise SubscriptionError(f"Failed to subscribe to subjects: {e}") from e

        try:
            initial = await self.snapshot(user_id)
        except Exception:
            await subscription.close()
            raise
        finally:
            await self._service.release()
        logger.info(
            "Subject stream opened",
            extra={"user_id": user_id, "count": len(initial)},
        )
        return SnapshotStream(initial, subscription)

    async def create(self, user_id: str, name: str, type: str) -> str:
        """Add a subject with zero counts.

        Returns:
            Identifier assigned by the store.

        Raises:
            InvalidFieldError: If name or type is blank.
            DatabaseConnectionError: If the insert fails.
        """
        subject = await self._service.create_subject(user_id, name, type)
        logger.info(
            "Subject created",
            extra={"user_id": user_id, "subject_id": subject.id},
        )
        await self._publish(user_id)
        return subject.id

    async def update_field(
        self, user_id: str, subject_id: str, field: str, value: Any
    ) -> Optional[SubjectRecord]:
        """Overwrite a single count.

        Input that is not a non-negative integer is ignored, leaving the
        stored value as it was.

        Returns:
            Updated record, or None if the input was ignored.

        Raises:
            InvalidFieldError: If field is not an editable count.
            RecordNotFoundError: If the subject does not exist for this identity.
            DatabaseConnectionError: If the update fails.
        """
        count = parse_count(value)
        if count is None:
            logger.debug(
                "Ignored count edit",
                extra={"subject_id": subject_id, "field": field, "value": value},
            )
            return None

        subject = await self._service.set_count(user_id, subject_id, field, count)
        await self._publish(user_id)
        return SubjectRecord.from_source(subject)

    async def delete(self, user_id: str, subject_id: str) -> None:
        """Remove a subject.

        Raises:
            RecordNotFoundError: If the subject does not exist for this identity.
            DatabaseConnectionError: If the delete fails.
        """
        await self._service.delete(user_id, subject_id)
        logger.info(
            "Subject deleted",
            extra={"user_id": user_id, "subject_id": subject_id},
        )
        await self._publish(user_id)

    async def _publish(self, user_id: str) -> None:
        # The write is committed at this point; a failed push only delays
        # subscribers until the next successful one.
        try:
            await self._feed.publish(user_id, await self.snapshot(user_id))
        except RedisError as e:
            logger.error(
                "Failed to publish subject snapshot",
                extra={"user_id": user_id, "error": str(e)},
                exc_info=True,
            )

"""Per-request dashboard context.

Bundles the anonymous identity, the subject store and the error notice
board. Dashboard operations run through ``DashboardContext.attempt`` so
every failure is turned into one user-facing message at the call site.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Optional, TypeVar

from redis.exceptions import RedisError

from attendance.exceptions import AppError
from attendance.services.error_notice import ErrorNotice
from attendance.services.subject_store import SubjectStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

INIT_FAILED = "Failed to initialize the attendance store."
AUTH_FAILED = "Authentication failed."
LOAD_FAILED = "Failed to load data."
ADD_FAILED = "Could not add subject."
UPDATE_FAILED = "Could not update subject."
DELETE_FAILED = "Could not delete subject."
SUBJECT_TOO_LONG = "Subject name or type is too long."


@dataclass
class DashboardContext:
    """Everything a dashboard request needs, passed explicitly.

    Attributes:
        user_id: Anonymous identity, None if sign-in failed.
        store: Subject store, None if the identity or the store is unavailable.
        notices: Error notice board, None if Redis is unavailable.
        fatal_error: Message that blocks every operation for this request.
        last_error: Message reported during this request; shown when the
            notice board cannot be read.
    """

    user_id: Optional[str]
    store: Optional[SubjectStore]
    notices: Optional[ErrorNotice]
    fatal_error: Optional[str] = None
    last_error: Optional[str] = field(default=None, compare=False)

    @property
    def ready(self) -> bool:
        return self.fatal_error is None and self.user_id is not None and self.store is not None

    async def attempt(self, operation: Awaitable[T], failure_message: str) -> Optional[T]:
        """Await an operation, converting application errors to the notice.

        Args:
            operation: Awaitable store call.
            failure_message: Message shown to the user if it fails.

        Returns:
            The operation result, or None if it failed.
        """
        try:
            return await operation
        except AppError as e:
            logger.warning(
                failure_message,
                extra={"user_id": self.user_id, "error": str(e)},
            )
            await self.report(failure_message)
            return None

    async def report(self, message: str) -> None:
        """Replace the identity's visible error message."""
        self.last_error = message
        if self.notices is None or self.user_id is None:
            logger.error("Cannot record error notice", extra={"notice": message})
            return
        try:
            await self.notices.set(self.user_id, message)
        except RedisError as e:
            logger.error(
                "Failed to store error notice",
                extra={"user_id": self.user_id, "notice": message, "error": str(e)},
            )

    async def current_error(self) -> Optional[str]:
        """Message to display, the fatal one taking precedence."""
        if self.fatal_error is not None:
            return self.fatal_error
        if self.notices is None or self.user_id is None:
            return self.last_error
        try:
            return await self.notices.get(self.user_id) or self.last_error
        except RedisError as e:
            logger.error(
                "Failed to read error notice",
                extra={"user_id": self.user_id, "error": str(e)},
            )
            return self.last_error

    async def dismiss_error(self) -> None:
        self.last_error = None
        if self.notices is None or self.user_id is None:
            return
        try:
            await self.notices.clear(self.user_id)
        except RedisError as e:
            logger.error(
                "Failed to clear error notice",
                extra={"user_id": self.user_id, "error": str(e)},
            )

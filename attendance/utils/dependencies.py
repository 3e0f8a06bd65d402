"""Dependency injection functions for FastAPI routes.

Each dependency is exposed as an attribute of ``dependencies`` so tests can
replace it through ``app.dependency_overrides[dependencies.<name>]``.
"""

from typing import Any, Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from attendance.config import get_settings
from attendance.context import AUTH_FAILED, INIT_FAILED, DashboardContext
from attendance.exceptions import AuthenticationError, StoreUnavailableError
from attendance.services.error_notice import ErrorNotice
from attendance.services.subject_feed import SubjectFeed
from attendance.services.subject_service import SubjectService
from attendance.services.subject_store import SubjectStore
from attendance.utils.db import get_db_session
from attendance.utils.pubsub import PubSubService
from attendance.utils.redis import get_redis_client


def startup_error(request: Request) -> Optional[str]:
    """Return the initialization failure recorded by the lifespan, if any."""
    return getattr(request.app.state, "startup_error", None)


def build_store(db: AsyncSession) -> SubjectStore:
    """Wire a subject store for one database session."""
    return SubjectStore(SubjectService(db), SubjectFeed(PubSubService(get_redis_client())))


def build_notices() -> ErrorNotice:
    return ErrorNotice(get_redis_client(), ttl=get_settings().error_notice_ttl)


def current_user_id(request: Request) -> str:
    """Get the anonymous identity of the request.

    Raises:
        AuthenticationError: If no identity could be established.
    """
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise AuthenticationError(AUTH_FAILED)
    return user_id


async def subject_store(
    request: Request, db: AsyncSession = Depends(get_db_session)
) -> SubjectStore:
    """Get a subject store bound to a request-scoped session.

    Raises:
        StoreUnavailableError: If the store failed to initialize.
    """
    if startup_error(request):
        raise StoreUnavailableError(INIT_FAILED)
    return build_store(db)


async def dashboard_context(
    request: Request, db: AsyncSession = Depends(get_db_session)
) -> DashboardContext:
    """Build the dashboard context, recording why operations are blocked."""
    error = startup_error(request)
    if error:
        return DashboardContext(user_id=None, store=None, notices=None, fatal_error=error)

    user_id = getattr(request.state, "user_id", None)
    notices = build_notices()
    if not user_id:
        return DashboardContext(
            user_id=None, store=None, notices=notices, fatal_error=AUTH_FAILED
        )

    return DashboardContext(user_id=user_id, store=build_store(db), notices=notices)


class Dependencies:
    """Container for all dependency injection functions."""

    user_id: Callable[..., Any] = staticmethod(current_user_id)
    store: Callable[..., Any] = staticmethod(subject_store)
    context: Callable[..., Any] = staticmethod(dashboard_context)


# Create singleton instance for easy access
dependencies = Dependencies()

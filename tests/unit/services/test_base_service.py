"""Unit tests for BaseService with transaction management."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance.exceptions import (
    DatabaseConnectionError,
    InvalidFieldError,
    RecordNotFoundError,
)
from attendance.models.subject import Subject
from attendance.services.base import BaseService


class OwnedSubjectService(BaseService[Subject]):
    """Plain service over Subject without the subject-specific helpers."""

    model = Subject


@pytest.fixture
def mock_session() -> MagicMock:
    """Create mock AsyncSession."""
    session = MagicMock(spec=AsyncSession)
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.execute = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def service(mock_session: MagicMock) -> OwnedSubjectService:
    return OwnedSubjectService(mock_session)


def returning(session: MagicMock, record) -> None:
    """Make the next query return record."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = record
    session.execute.return_value = result


@pytest.mark.asyncio
async def test_create_assigns_owner_and_commits(service, mock_session):
    subject = await service.create("user-1", name="Physics", type="Lab")

    assert subject.user_id == "user-1"
    assert subject.name == "Physics"
    mock_session.add.assert_called_once_with(subject)
    mock_session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_rollback_on_error(service, mock_session):
    mock_session.flush.side_effect = IntegrityError("INSERT", {}, Exception("dup"))

    with pytest.raises(DatabaseConnectionError):
        await service.create("user-1", name="Physics", type="Lab")

    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_called()


@pytest.mark.asyncio
async def test_get_owned_or_fail_raises_for_missing(service, mock_session):
    returning(mock_session, None)

    with pytest.raises(RecordNotFoundError) as exc_info:
        await service.get_owned_or_fail("user-1", "missing")

    assert exc_info.value.model_name == "Subject"
    assert exc_info.value.record_id == "missing"


@pytest.mark.asyncio
async def test_get_owned_wraps_database_errors(service, mock_session):
    mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

    with pytest.raises(DatabaseConnectionError):
        await service.get_owned("user-1", "s-1")


@pytest.mark.asyncio
async def test_list_owned_returns_rows(service, mock_session):
    rows = [Subject(name="A"), Subject(name="B")]
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    mock_session.execute.return_value = result

    assert await service.list_owned("user-1") == rows


@pytest.mark.asyncio
async def test_update_sets_attribute_and_commits(service, mock_session):
    subject = Subject(id="s-1", user_id="user-1", name="Physics", conducted=1, present=1)
    returning(mock_session, subject)

    updated = await service.update("user-1", "s-1", conducted=5)

    assert updated.conducted == 5
    mock_session.commit.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["user_id", "id", "nonexistent"])
async def test_update_rejects_protected_or_unknown_fields(service, mock_session, field):
    subject = Subject(id="s-1", user_id="user-1", name="Physics")
    returning(mock_session, subject)

    with pytest.raises(InvalidFieldError):
        await service.update("user-1", "s-1", **{field: "x"})

    assert subject.user_id == "user-1"
    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_called()


@pytest.mark.asyncio
async def test_update_missing_record_raises_not_found(service, mock_session):
    returning(mock_session, None)

    with pytest.raises(RecordNotFoundError):
        await service.update("other-user", "s-1", conducted=5)


@pytest.mark.asyncio
async def test_delete_removes_and_commits(service, mock_session):
    subject = Subject(id="s-1", user_id="user-1", name="Physics")
    returning(mock_session, subject)

    await service.delete("user-1", "s-1")

    mock_session.delete.assert_awaited_once_with(subject)
    mock_session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_rollback_on_error(service, mock_session):
    returning(mock_session, Subject(id="s-1", user_id="user-1", name="Physics"))
    mock_session.flush.side_effect = OperationalError("DELETE", {}, Exception("down"))

    with pytest.raises(DatabaseConnectionError):
        await service.delete("user-1", "s-1")

    mock_session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_release_closes_session(service, mock_session):
    await service.release()

    mock_session.close.assert_awaited_once()
    mock_session.commit.assert_not_called()

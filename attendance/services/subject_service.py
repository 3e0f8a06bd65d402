"""Subject service providing business logic for Subject model operations."""

import logging
from typing import List

from sqlalchemy import func

from attendance.exceptions import InvalidFieldError
from attendance.models.subject import NAME_MAX_LENGTH, TYPE_MAX_LENGTH, Subject
from attendance.services.base import BaseService

logger = logging.getLogger(__name__)

# Count fields a user may edit one at a time
EDITABLE_COUNTS: tuple[str, ...] = ("conducted", "present")


class SubjectService(BaseService[Subject]):
    """Service for managing the subjects of one identity.

    Adds to BaseService:
    - create_subject(user_id, name, type): trimmed, zero counts
    - list_subjects(user_id): ordered by name, case-insensitively
    - set_count(user_id, id, field, value): single count edit

    Usage:
        service = SubjectService(db_session)
        subject = await service.create_subject(user_id, "  Physics ", "Lab")
        await service.set_count(user_id, subject.id, "conducted", 12)
    """

    model = Subject

    async def create_subject(self, user_id: str, name: str, type: str) -> Subject:
        """Create a subject with no classes recorded yet.

        Args:
            user_id: Owner identity.
            name: Subject name; surrounding whitespace is removed.
            type: Category label; surrounding whitespace is removed.

        Returns:
            Created subject.

        Raises:
            InvalidFieldError: If name or type is empty after trimming or too long.
            DatabaseConnectionError: If database operation fails.
        """
        name = (name or "").strip()
        type = (type or "").strip()
        if not name:
            raise InvalidFieldError("name", "must not be empty")
        if not type:
            raise InvalidFieldError("type", "must not be empty")
        if len(name) > NAME_MAX_LENGTH:
            raise InvalidFieldError("name", f"must be at most {NAME_MAX_LENGTH} characters")
        if len(type) > TYPE_MAX_LENGTH:
            raise InvalidFieldError("type", f"must be at most {TYPE_MAX_LENGTH} characters")

        return await self.create(user_id, name=name, type=type, conducted=0, present=0)

    async def list_subjects(self, user_id: str) -> List[Subject]:
        """Get every subject of user ordered by name."""
        return await self.list_owned(user_id, func.lower(Subject.name), Subject.name)

    async def set_count(
        self, user_id: str, subject_id: str, field: str, value: int
    ) -> Subject:
        """Overwrite one count of a subject.

        Args:
            user_id: Owner identity.
            subject_id: Subject to edit.
            field: "conducted" or "present".
            value: New non-negative count.

        Returns:
            Updated subject.

        Raises:
            InvalidFieldError: If field is not editable or value is negative.
            RecordNotFoundError: If the subject does not exist for this owner.
            DatabaseConnectionError: If database operation fails.
        """
        if field not in EDITABLE_COUNTS:
            raise InvalidFieldError(field, f"must be one of {', '.join(EDITABLE_COUNTS)}")
        if value < 0:
            raise InvalidFieldError(field, "must not be negative")

        return await self.update(user_id, subject_id, **{field: value})

"""Base service class with transaction management for identity-scoped records."""

import logging
from typing import Any, Generic, List, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance.exceptions import (
    DatabaseConnectionError,
    InvalidFieldError,
    RecordNotFoundError,
)
from attendance.models.base import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseService(Generic[T]):
    """Base service managing database transactions for records owned by a user.

    Every operation takes the owner's ``user_id`` and only ever sees that
    owner's rows; a record owned by someone else behaves as missing.

    - Write operations (create, update, delete) commit immediately
    - Read operations (get_owned, list_owned) don't commit
    - Errors roll back and surface as DatabaseConnectionError

    Usage:
        class NoteService(BaseService[Note]):
            model = Note

        service = NoteService(db_session)
        note = await service.create(user_id, text="hello")

    Attributes:
        db: Database session for operations
        model: Model class this service manages; must have a user_id column
    """

    model: type[T]

    def __init__(self, db: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            db: Database session for operations
        """
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def release(self) -> None:
        """Return the session's connection to the pool.

        The session stays usable and checks a connection out again on its
        next query. Loaded instances are detached.
        """
        await self.db.close()

    async def create(self, user_id: str, **kwargs: Any) -> T:
        """Create a new record for user and commit transaction.

        Args:
            user_id: Owner of the new record
            **kwargs: Model attributes

        Returns:
            Created model instance

        Raises:
            DatabaseConnectionError: If database operation fails
        """
        try:
            instance = self.model(user_id=user_id, **kwargs)
            self.db.add(instance)
            await self.db.flush()
            await self.db.refresh(instance)
            await self.db.commit()
            logger.debug(
                f"Created {self.model_name}",
                extra={"model": self.model_name, "id": instance.id},
            )
            return instance
        except (IntegrityError, DBAPIError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.error(
                f"Failed to create {self.model_name}",
                extra={"model": self.model_name, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(
                f"Database error during create: {str(e)}"
            ) from e

    async def get_owned(self, user_id: str, record_id: str) -> Optional[T]:
        """Retrieve a record by ID if it belongs to user.

        Args:
            user_id: Owner to scope by
            record_id: Primary key ID

        Returns:
            Model instance or None if not found for this owner

        Raises:
            DatabaseConnectionError: If database operation fails
        """
        try:
            result = await self.db.execute(
                select(self.model).where(
                    self.model.id == record_id, self.model.user_id == user_id
                )
            )
            return result.scalar_one_or_none()
        except (DBAPIError, SQLAlchemyError) as e:
            logger.error(
                f"Failed to get {self.model_name} by id",
                extra={"model": self.model_name, "id": record_id, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(f"Database error during get: {str(e)}") from e

    async def get_owned_or_fail(self, user_id: str, record_id: str) -> T:
        """Retrieve a record owned by user or raise.

        Raises:
            RecordNotFoundError: If record not found for this owner
            DatabaseConnectionError: If database operation fails
        """
        record = await self.get_owned(user_id, record_id)
        if record is None:
            raise RecordNotFoundError(self.model_name, record_id)
        return record

    async def list_owned(self, user_id: str, *order_by: Any) -> List[T]:
        """Retrieve every record of user.

        Args:
            user_id: Owner to scope by
            *order_by: Optional ORDER BY clauses

        Returns:
            List of model instances

        Raises:
            DatabaseConnectionError: If database operation fails
        """
        try:
            query = select(self.model).where(self.model.user_id == user_id)
            if order_by:
                query = query.order_by(*order_by)
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except (DBAPIError, SQLAlchemyError) as e:
            logger.error(
                f"Failed to list {self.model_name}",
                extra={"model": self.model_name, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(
                f"Database error during list: {str(e)}"
            ) from e

    async def update(self, user_id: str, record_id: str, **kwargs: Any) -> T:
        """Update a record owned by user and commit transaction.

        Args:
            user_id: Owner to scope by
            record_id: Primary key ID of record to update
            **kwargs: Attributes to update

        Returns:
            Updated model instance

        Raises:
            RecordNotFoundError: If record not found for this owner
            InvalidFieldError: If an attribute does not exist
            DatabaseConnectionError: If database operation fails
        """
        try:
            record = await self.get_owned_or_fail(user_id, record_id)
            for key, value in kwargs.items():
                if key in ("id", "user_id") or not hasattr(record, key):
                    raise InvalidFieldError(key, f"not an attribute of {self.model_name}")
                setattr(record, key, value)
            await self.db.flush()
            await self.db.refresh(record)
            await self.db.commit()
            logger.debug(
                f"Updated {self.model_name}",
                extra={"model": self.model_name, "id": record_id},
            )
            return record
        except (RecordNotFoundError, InvalidFieldError):
            await self.db.rollback()
            raise
        except (IntegrityError, DBAPIError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.error(
                f"Failed to update {self.model_name}",
                extra={"model": self.model_name, "id": record_id, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(
                f"Database error during update: {str(e)}"
            ) from e

    async def delete(self, user_id: str, record_id: str) -> None:
        """Delete a record owned by user and commit transaction.

        Raises:
            RecordNotFoundError: If record not found for this owner
            DatabaseConnectionError: If database operation fails
        """
        try:
            record = await self.get_owned_or_fail(user_id, record_id)
            await self.db.delete(record)
            await self.db.flush()
            await self.db.commit()
            logger.debug(
                f"Deleted {self.model_name}",
                extra={"model": self.model_name, "id": record_id},
            )
        except RecordNotFoundError:
            await self.db.rollback()
            raise
        except (DBAPIError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.error(
                f"Failed to delete {self.model_name}",
                extra={"model": self.model_name, "id": record_id, "error": str(e)},
                exc_info=True,
            )
            raise DatabaseConnectionError(
                f"Database error during delete: {str(e)}"
            ) from e

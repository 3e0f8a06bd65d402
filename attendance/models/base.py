"""Base model class with identifier and timestamp tracking."""

import uuid
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from attendance.utils.db import Base


def generate_id() -> str:
    """Generate an opaque record identifier."""
    return str(uuid.uuid4())


class BaseModel(Base):
    """Abstract base class for SQLAlchemy models.

    Provides common columns for all models:
    - Opaque string primary key (id), assigned on creation
    - Timestamps (created_at, updated_at)

    Queries and transactions live in the service layer (see BaseService).
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model instance to dictionary.

        Returns:
            Dictionary representation of the model
        """
        return {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }

    def __repr__(self) -> str:
        attrs = ", ".join(
            f"{key}={value!r}" for key, value in self.to_dict().items() if key != "id"
        )
        return f"{self.__class__.__name__}(id={self.id!r}, {attrs})"

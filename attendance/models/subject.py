"""Subject model holding per-subject class counts."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from attendance.models.base import BaseModel

NAME_MAX_LENGTH = 255
TYPE_MAX_LENGTH = 100


class Subject(BaseModel):
    """Attendance counts for one subject of one anonymous identity.

    Every query is scoped by ``user_id``; records of one identity are never
    visible to another. ``present`` is expected not to exceed ``conducted``
    but that is not enforced.

    Attributes:
        user_id: Opaque identity the record belongs to (partition key)
        name: Subject name, trimmed (e.g., "Physics")
        type: Free-text category (e.g., "Lecture", "Lab")
        conducted: Number of classes held
        present: Number of classes attended
    """

    __tablename__ = "subjects"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    type: Mapped[str] = mapped_column(String(TYPE_MAX_LENGTH), nullable=False)
    conducted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    present: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return (
            f"Subject(id={self.id!r}, name={self.name!r}, "
            f"conducted={self.conducted}, present={self.present})"
        )

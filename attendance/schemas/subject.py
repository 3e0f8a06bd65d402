"""Subject schemas for API request/response models."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from attendance.core.summary import SubjectRecord
from attendance.models.subject import NAME_MAX_LENGTH, TYPE_MAX_LENGTH


class SubjectCreate(BaseModel):
    """Schema for creating a subject.

    Attributes:
        name: Name of the subject, trimmed.
        type: Category label such as "Lecture" or "Lab", trimmed.
    """

    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    type: str = Field(default="Lecture", max_length=TYPE_MAX_LENGTH)

    @field_validator("name", "type")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


class SubjectCountUpdate(BaseModel):
    """Schema for editing one count of a subject."""

    field: Literal["conducted", "present"]
    value: int = Field(..., ge=0)


class SubjectResponse(BaseModel):
    """Response schema for subject.

    Attributes:
        id: Subject ID.
        name: Subject name.
        type: Category label.
        conducted: Classes held.
        present: Classes attended.
        absent: Classes missed, never below zero.
        percentage: Attendance percentage.
    """

    id: str
    name: str
    type: str
    conducted: int
    present: int
    absent: int
    percentage: float

    @classmethod
    def from_record(cls, record: SubjectRecord) -> "SubjectResponse":
        return cls(
            **record.to_dict(),
            absent=record.absent,
            percentage=record.percentage,
        )


class SummaryResponse(BaseModel):
    """Totals across every subject."""

    total_conducted: int
    total_present: int
    total_absent: int
    overall_percentage: float


class ProjectionResponse(BaseModel):
    """Classes needed per target for one subject or the overall total.

    ``needed`` maps each target percentage to a class count.
    """

    label: str
    subject_id: str | None = None
    needed: dict[int, int]


class AdviceRequest(BaseModel):
    """Schema for requesting advice."""

    target: int = 75
    future_commitments: str = Field(default="", max_length=500)


class AdviceResponse(BaseModel):
    """Advisory message with the summary it was built from."""

    target: int
    advice: str
    summary: SummaryResponse

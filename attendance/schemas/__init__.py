"""Pydantic schemas for API request/response models."""

from attendance.schemas.subject import (
    AdviceRequest,
    AdviceResponse,
    ProjectionResponse,
    SubjectCountUpdate,
    SubjectCreate,
    SubjectResponse,
    SummaryResponse,
)

__all__ = [
    "AdviceRequest",
    "AdviceResponse",
    "ProjectionResponse",
    "SubjectCountUpdate",
    "SubjectCreate",
    "SubjectResponse",
    "SummaryResponse",
]

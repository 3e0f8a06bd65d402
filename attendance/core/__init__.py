"""Attendance calculations package."""

from attendance.core.advisor import build_advice, validate_target
from attendance.core.calculator import (
    calculate_absent,
    calculate_percentage,
    calculate_projection,
)
from attendance.core.summary import (
    DEFAULT_TARGET,
    SUPPORTED_TARGETS,
    ProjectionRow,
    SubjectRecord,
    Summary,
    build_projection_table,
    sort_records,
    summarize,
)

__all__ = [
    "DEFAULT_TARGET",
    "SUPPORTED_TARGETS",
    "ProjectionRow",
    "SubjectRecord",
    "Summary",
    "build_advice",
    "build_projection_table",
    "calculate_absent",
    "calculate_percentage",
    "calculate_projection",
    "sort_records",
    "summarize",
    "validate_target",
]

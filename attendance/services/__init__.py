"""Business logic services package."""

from attendance.services.base import BaseService
from attendance.services.error_notice import ErrorNotice
from attendance.services.subject_feed import SubjectFeed
from attendance.services.subject_service import SubjectService
from attendance.services.subject_store import SnapshotStream, SubjectStore

__all__ = [
    "BaseService",
    "ErrorNotice",
    "SnapshotStream",
    "SubjectFeed",
    "SubjectService",
    "SubjectStore",
]

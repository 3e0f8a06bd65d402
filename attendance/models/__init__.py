"""Data models package."""

from attendance.models.base import BaseModel
from attendance.models.subject import Subject

__all__ = ["BaseModel", "Subject"]

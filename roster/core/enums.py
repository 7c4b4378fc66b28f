"""
Enumerations and constants for the Roster service.
"""

from enum import Enum


class Collection(Enum):
    """Entity collections held by the document store."""
    COURSE = "course"
    STUDENT = "student"
    GRADE = "grade"


class ReferenceField(Enum):
    """Stored reference fields a listing can be filtered by."""
    COURSE_ID = "course_id"
    STUDENT_ID = "student_id"
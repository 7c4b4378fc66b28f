"""
Core entities for the Roster service.

Entities hold references to other collections as plain identifier fields.
Nothing here checks that a referenced record exists; resolution happens at
read time in :mod:`roster.core.projection`.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from .enums import Collection


Score = Union[int, float]


def _parse_timestamp(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class AbstractEntity(ABC):
    """Base abstract entity with a universal ID and a creation timestamp."""

    collection: Collection

    def __init__(self, entity_id: Optional[str] = None, created_at: Optional[datetime] = None):
        self._id = entity_id or str(uuid.uuid4())
        self._created_at = created_at or datetime.now(timezone.utc)

    @property
    def id(self) -> str:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
        }

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AbstractEntity':
        """Rebuild an entity from its stored dictionary."""
        pass

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractEntity):
            return NotImplemented
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, created_at={self._created_at.isoformat()})"


class Course(AbstractEntity):
    """Course entity. Referenced by students and grades, owns nothing."""

    collection = Collection.COURSE

    def __init__(self, name: str, **kwargs):
        super().__init__(**kwargs)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
        })
        return base_dict

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Course':
        return cls(
            name=data["name"],
            entity_id=data["id"],
            created_at=_parse_timestamp(data["created_at"]),
        )


class Student(AbstractEntity):
    """Student entity with an optional weak reference to a course."""

    collection = Collection.STUDENT

    def __init__(self, name: str, email: Optional[str] = None, course_id: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._name = name
        self._email = email
        self._course_id = course_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def email(self) -> Optional[str]:
        return self._email

    @property
    def course_id(self) -> Optional[str]:
        return self._course_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'email': self._email,
            'course_id': self._course_id,
        })
        return base_dict

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Student':
        return cls(
            name=data["name"],
            email=data.get("email"),
            course_id=data.get("course_id"),
            entity_id=data["id"],
            created_at=_parse_timestamp(data["created_at"]),
        )


class Grade(AbstractEntity):
    """Immutable grade entity referencing a student and a course."""

    collection = Collection.GRADE

    def __init__(self, student_id: str, course_id: str, score: Score, **kwargs):
        super().__init__(**kwargs)
        self._student_id = student_id
        self._course_id = course_id
        self._score = score

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def course_id(self) -> str:
        return self._course_id

    @property
    def score(self) -> Score:
        return self._score

    def to_dict(self) -> Dict[str, Any]:
        """Convert grade to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'student_id': self._student_id,
            'course_id': self._course_id,
            'score': self._score,
        })
        return base_dict

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Grade':
        return cls(
            student_id=data["student_id"],
            course_id=data["course_id"],
            score=data["score"],
            entity_id=data["id"],
            created_at=_parse_timestamp(data["created_at"]),
        )

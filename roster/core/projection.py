"""
Flat, client-ready views of stored records.

Each ``project_*`` function takes a normalized entity plus a
:class:`~roster.core.interfaces.NameResolver` and returns the denormalized
dict sent to clients. For a reference field ``X_id`` holding ``v``:

* ``v`` unset: ``X_id`` and ``X_name`` are both None.
* ``v`` set and resolves: ``X_id`` is ``v``, ``X_name`` is the resolved name.
* ``v`` set but dangling: ``X_id`` is still ``v``, ``X_name`` is None.

The functions never touch a store, so the rules above can be checked
directly against a :class:`~roster.core.interfaces.MappingNameResolver`.
"""

from typing import Any, Dict, Optional, Tuple

from .entities import Course, Grade, Student
from .enums import Collection
from .interfaces import NameResolver


def resolve_reference(resolver: NameResolver, collection: Collection,
                      ref_id: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Apply the null-propagation rule to one reference, returning ``(id, name)``."""
    if ref_id is None:
        return None, None
    return ref_id, resolver.name_of(collection, ref_id)


def project_course(course: Course) -> Dict[str, Any]:
    return {
        "id": course.id,
        "name": course.name,
    }


def project_student(student: Student, resolver: NameResolver) -> Dict[str, Any]:
    course_id, course_name = resolve_reference(resolver, Collection.COURSE, student.course_id)
    return {
        "id": student.id,
        "name": student.name,
        "email": student.email,
        "course_id": course_id,
        "course_name": course_name,
        "created_at": student.created_at,
    }


def project_grade(grade: Grade, resolver: NameResolver) -> Dict[str, Any]:
    # student and course resolve independently of each other
    student_id, student_name = resolve_reference(resolver, Collection.STUDENT, grade.student_id)
    course_id, course_name = resolve_reference(resolver, Collection.COURSE, grade.course_id)
    return {
        "id": grade.id,
        "student_id": student_id,
        "student_name": student_name,
        "course_id": course_id,
        "course_name": course_name,
        "score": grade.score,
        "created_at": grade.created_at,
    }

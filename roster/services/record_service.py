"""
Record service: validation, writes and denormalized reads.

Every operation is a single request/response. Store calls are synchronous,
so each one runs in a worker thread and the calling coroutine suspends
while it waits. Store failures surface as :class:`RetrievalError` or
:class:`WriteError`; references that fail to resolve are not errors.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from ..core.entities import Course, Grade, Student
from ..core.enums import Collection
from ..core.exceptions import PersistenceError, RetrievalError, WriteError
from ..core.interfaces import MappingNameResolver, NameResolver
from ..core.projection import project_course, project_grade, project_student
from ..core.validation import validate_course, validate_grade, validate_student
from ..persistence.repositories import (
    BaseRepository, CourseRepository, GradeRepository, StudentRepository
)


logger = logging.getLogger(__name__)


class RecordService:
    """Lists and creates courses, students and grades as flat views."""

    def __init__(self, course_repo: CourseRepository, student_repo: StudentRepository,
                 grade_repo: GradeRepository):
        self._course_repo = course_repo
        self._student_repo = student_repo
        self._grade_repo = grade_repo
        self._repos_by_collection: Dict[Collection, BaseRepository] = {
            Collection.COURSE: course_repo,
            Collection.STUDENT: student_repo,
            Collection.GRADE: grade_repo,
        }

    # Courses

    async def list_courses(self) -> List[Dict[str, Any]]:
        courses = await self._read(self._course_repo.find_all)
        return [project_course(course) for course in courses]

    async def create_course(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        course = Course(**validate_course(payload))
        await self._write(self._course_repo.save, course)
        logger.info("Created course %s", course.id)
        return project_course(course)

    # Students

    async def list_students(self, course_id: Optional[str] = None) -> List[Dict[str, Any]]:
        students = await self._read(self._student_repo.find_all, {"course_id": course_id})
        resolver = await self._resolver_for(students, (Collection.COURSE,))
        return [project_student(student, resolver) for student in students]

    async def create_student(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        student = Student(**validate_student(payload))
        await self._write(self._student_repo.save, student)
        logger.info("Created student %s", student.id)
        stored = await self._reload(self._student_repo, student.id)
        resolver = await self._resolver_for([stored], (Collection.COURSE,))
        return project_student(stored, resolver)

    # Grades

    async def list_grades(self, student_id: Optional[str] = None,
                          course_id: Optional[str] = None) -> List[Dict[str, Any]]:
        grades = await self._read(self._grade_repo.find_all,
                                  {"student_id": student_id, "course_id": course_id})
        resolver = await self._resolver_for(grades, (Collection.STUDENT, Collection.COURSE))
        return [project_grade(grade, resolver) for grade in grades]

    async def create_grade(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        grade = Grade(**validate_grade(payload))
        await self._write(self._grade_repo.save, grade)
        logger.info("Created grade %s", grade.id)
        stored = await self._reload(self._grade_repo, grade.id)
        resolver = await self._resolver_for([stored], (Collection.STUDENT, Collection.COURSE))
        return project_grade(stored, resolver)

    # Helpers

    async def _resolver_for(self, records: Sequence[Any],
                            collections: Sequence[Collection]) -> NameResolver:
        """Prefetch the names every record references, one batch per collection.

        The lookups are read-only and independent, so they run concurrently.
        """
        field_for = {Collection.COURSE: "course_id", Collection.STUDENT: "student_id"}
        lookups = []
        for collection in collections:
            ids = {getattr(record, field_for[collection]) for record in records}
            ids.discard(None)
            lookups.append(self._read(self._repos_by_collection[collection].find_by_ids, ids))
        found = await asyncio.gather(*lookups)
        return MappingNameResolver({
            collection: {ref_id: entity.name for ref_id, entity in entities.items()}
            for collection, entities in zip(collections, found)
        })

    async def _reload(self, repo: BaseRepository, entity_id: str) -> Any:
        stored = await self._read(repo.find_by_id, entity_id)
        if stored is None:
            raise RetrievalError(f"{repo.collection.value} {entity_id} missing after create")
        return stored

    async def _read(self, operation: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(operation, *args)
        except PersistenceError as e:
            raise RetrievalError(e.message, error_code="retrieval_failed") from e

    async def _write(self, operation: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(operation, *args)
        except PersistenceError as e:
            raise WriteError(e.message, error_code="write_failed") from e

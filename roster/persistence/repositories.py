"""
Repository pattern implementations for data access.
"""

import json
import logging
import threading
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from ..core.entities import AbstractEntity, Course, Grade, Student
from ..core.enums import Collection, ReferenceField
from ..core.exceptions import DuplicateEntityError, PersistenceError, ValidationError
from ..core.interfaces import Repository
from .database import DatabaseManager

T = TypeVar('T', bound=AbstractEntity)

logger = logging.getLogger(__name__)

# SQLite caps the number of bound parameters per statement.
_ID_BATCH_SIZE = 500


class BaseRepository(Repository[T], Generic[T]):
    """Base repository implementation with common functionality."""

    entity_class: Type[T]
    reference_fields: tuple = ()
    
    def __init__(self, database: DatabaseManager, collection: Collection):
        self._database = database
        self._collection = collection
        self._lock = threading.RLock()

    @property
    def collection(self) -> Collection:
        return self._collection
    
    def save(self, entity: T) -> T:
        """Insert a new entity. Stored records are never updated."""
        with self._lock:
            if self.find_by_id(entity.id) is not None:
                raise DuplicateEntityError(f"{self._collection.value} {entity.id} already exists")
            try:
                query = """
                    INSERT INTO documents (id, collection, data, created_at)
                    VALUES (?, ?, ?, ?)
                """
                params = (
                    entity.id,
                    self._collection.value,
                    json.dumps(entity.to_dict()),
                    entity.created_at.isoformat(),
                )
                self._database.execute_update(query, params)
                logger.debug("Saved %s %s", self._collection.value, entity.id)
                return entity
            except Exception as e:
                raise PersistenceError(f"Failed to save {self._collection.value}: {str(e)}") from e
    
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find entity by ID."""
        with self._lock:
            try:
                query = "SELECT data FROM documents WHERE id = ? AND collection = ?"
                results = self._database.execute_query(query, (entity_id, self._collection.value))
                
                if results:
                    return self._entity_from_dict(json.loads(results[0]["data"]))
                return None
            except Exception as e:
                raise PersistenceError(f"Failed to find {self._collection.value} by ID: {str(e)}") from e

    def find_by_ids(self, entity_ids: Iterable[str]) -> Dict[str, T]:
        """Batch lookup used for reference resolution. Unknown IDs are skipped."""
        wanted = list(dict.fromkeys(entity_id for entity_id in entity_ids if entity_id is not None))
        found: Dict[str, T] = {}
        if not wanted:
            return found
        with self._lock:
            try:
                for start in range(0, len(wanted), _ID_BATCH_SIZE):
                    batch = wanted[start:start + _ID_BATCH_SIZE]
                    placeholders = ", ".join("?" for _ in batch)
                    query = (
                        f"SELECT data FROM documents WHERE collection = ? AND id IN ({placeholders})"
                    )
                    results = self._database.execute_query(query, (self._collection.value, *batch))
                    for row in results:
                        entity = self._entity_from_dict(json.loads(row["data"]))
                        found[entity.id] = entity
                return found
            except Exception as e:
                raise PersistenceError(f"Failed to find {self._collection.value}s by ID: {str(e)}") from e
    
    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """Find all entities in insertion order.

        ``filters`` may name any of this collection's reference fields; a
        ``None`` value is ignored.
        """
        with self._lock:
            query = "SELECT data FROM documents WHERE collection = ?"
            params: List[Any] = [self._collection.value]
            
            if filters:
                for key, value in filters.items():
                    if value is None:
                        continue
                    field = self._reference_field(key)
                    query += f" AND json_extract(data, '$.{field.value}') = ?"
                    params.append(value)
            
            query += " ORDER BY seq ASC"

            try:
                results = self._database.execute_query(query, tuple(params))
                return [self._entity_from_dict(json.loads(row["data"])) for row in results]
            except Exception as e:
                raise PersistenceError(f"Failed to find {self._collection.value}s: {str(e)}") from e
    
    def _reference_field(self, key: str) -> ReferenceField:
        for field in self.reference_fields:
            if field.value == key:
                return field
        raise ValidationError(f"Cannot filter {self._collection.value}s by {key}",
                              error_code="invalid_filter", details={"field": key})
    
    def _entity_from_dict(self, data: Dict[str, Any]) -> T:
        """Convert dictionary to entity instance."""
        return self.entity_class.from_dict(data)


class CourseRepository(BaseRepository[Course]):
    """Repository for Course entities."""

    entity_class = Course
    
    def __init__(self, database: DatabaseManager):
        super().__init__(database, Collection.COURSE)


class StudentRepository(BaseRepository[Student]):
    """Repository for Student entities."""

    entity_class = Student
    reference_fields = (ReferenceField.COURSE_ID,)
    
    def __init__(self, database: DatabaseManager):
        super().__init__(database, Collection.STUDENT)


class GradeRepository(BaseRepository[Grade]):
    """Repository for Grade entities."""

    entity_class = Grade
    reference_fields = (ReferenceField.STUDENT_ID, ReferenceField.COURSE_ID)
    
    def __init__(self, database: DatabaseManager):
        super().__init__(database, Collection.GRADE)

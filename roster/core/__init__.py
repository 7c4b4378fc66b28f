"""
Core module containing entities, validation and the projection rules.
"""

from .entities import *
from .enums import *
from .exceptions import *
from .interfaces import *
from .projection import *
from .validation import *

__all__ = [
    # Entities
    "AbstractEntity",
    "Course",
    "Student",
    "Grade",

    # Enums
    "Collection",
    "ReferenceField",

    # Interfaces
    "Repository",
    "NameResolver",
    "MappingNameResolver",

    # Projection
    "project_course",
    "project_student",
    "project_grade",

    # Validation
    "validate_course",
    "validate_student",
    "validate_grade",

    # Exceptions
    "RosterException",
    "ValidationError",
    "PersistenceError",
    "RetrievalError",
    "WriteError",
    "DuplicateEntityError",
    "ConfigurationError",
]

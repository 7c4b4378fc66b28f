"""
Persistence module for document storage and per-collection repositories.
"""

from .database import DatabaseManager, SQLiteDatabase, DatabaseFactory
from .repositories import (
    BaseRepository, CourseRepository, StudentRepository, GradeRepository
)

__all__ = [
    "DatabaseManager",
    "SQLiteDatabase",
    "DatabaseFactory",
    "BaseRepository",
    "CourseRepository",
    "StudentRepository",
    "GradeRepository",
]

"""
Database management and connection handling.

Records are kept as JSON documents in a single ``documents`` table, one row
per record, tagged with the collection they belong to. ``seq`` grows with
every insert and gives listings their natural order.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from ..core.exceptions import PersistenceError, ConfigurationError


logger = logging.getLogger(__name__)


DOCUMENTS_SCHEMA = """
    CREATE TABLE IF NOT EXISTS documents (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL,
        collection TEXT NOT NULL,
        data TEXT NOT NULL,
        created_at TIMESTAMP NOT NULL,
        UNIQUE (collection, id)
    )
"""


class DatabaseManager(ABC):
    """Abstract base class for database management."""
    
    @abstractmethod
    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """Execute a query and return results."""
        pass
    
    @abstractmethod
    def execute_update(self, query: str, params: Optional[tuple] = None) -> int:
        """Execute an update query and return affected rows."""
        pass
    
    @abstractmethod
    def create_tables(self, schema: Dict[str, str]) -> None:
        """Create database tables from schema."""
        pass
    
    @abstractmethod
    def ping(self) -> bool:
        """Return True if the store answers a trivial query."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection."""
        pass


class SQLiteDatabase(DatabaseManager):
    """SQLite database implementation.

    One connection is opened at construction and shared by every caller;
    access to it is serialized with a re-entrant lock.
    """
    
    def __init__(self, database_path: str = "roster.db"):
        self._database_path = database_path
        self._lock = threading.RLock()
        try:
            self._connection = sqlite3.connect(self._database_path, check_same_thread=False)
        except sqlite3.Error as e:
            raise PersistenceError(f"Database connection error: {str(e)}")
        self._connection.row_factory = sqlite3.Row
        self._initialize_database()

    def _initialize_database(self) -> None:
        """Initialize the database with the documents table."""
        self.create_tables({"documents": DOCUMENTS_SCHEMA})
    
    @contextmanager
    def _get_connection(self):
        """Hold the shared connection, rolling back and wrapping any failure."""
        with self._lock:
            if self._connection is None:
                raise PersistenceError("Database connection is closed")
            try:
                yield self._connection
            except sqlite3.Error as e:
                self._connection.rollback()
                raise PersistenceError(f"Database error: {str(e)}") from e
    
    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        """Execute a query and return results."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            
            columns = [description[0] for description in cursor.description]
            results = []
            for row in cursor.fetchall():
                results.append(dict(zip(columns, row)))
            return results
    
    def execute_update(self, query: str, params: Optional[tuple] = None) -> int:
        """Execute an update query and return affected rows."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            conn.commit()
            return cursor.rowcount
    
    def create_tables(self, schema: Dict[str, str]) -> None:
        """Create database tables from schema."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            for table_name, table_schema in schema.items():
                cursor.execute(table_schema)
            conn.commit()
    
    def ping(self) -> bool:
        try:
            self.execute_query("SELECT 1 AS ok")
            return True
        except PersistenceError as e:
            logger.warning("Database ping failed: %s", e)
            return False

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None


class DatabaseFactory:
    """Factory for creating database instances."""
    
    @staticmethod
    def create_database(database_type: str, **kwargs) -> DatabaseManager:
        """Create a database instance based on type."""
        if database_type.lower() == "sqlite":
            return SQLiteDatabase(**kwargs)
        else:
            raise ConfigurationError(f"Unsupported database type: {database_type}")

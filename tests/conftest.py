# tests/conftest.py

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from roster.api.rest_api import RosterRestAPI
from roster.config import Settings
from roster.core.exceptions import PersistenceError
from roster.main import RosterPlatform
from roster.persistence import (
    CourseRepository,
    DatabaseManager,
    GradeRepository,
    SQLiteDatabase,
    StudentRepository,
)
from roster.services import RecordService

FRONTEND_URL = "http://frontend.test"


class BrokenDatabase(DatabaseManager):
    """A store that fails every call, as an unreachable server would."""

    def execute_query(self, query: str, params: Optional[tuple] = None) -> List[Dict[str, Any]]:
        raise PersistenceError("connection refused")

    def execute_update(self, query: str, params: Optional[tuple] = None) -> int:
        raise PersistenceError("connection refused")

    def create_tables(self, schema: Dict[str, str]) -> None:
        raise PersistenceError("connection refused")

    def ping(self) -> bool:
        return False

    def close(self) -> None:
        pass


def build_service(database: DatabaseManager) -> RecordService:
    return RecordService(
        CourseRepository(database),
        StudentRepository(database),
        GradeRepository(database),
    )


@pytest.fixture
def database(tmp_path):
    db = SQLiteDatabase(str(tmp_path / "roster.db"))
    yield db
    db.close()


@pytest.fixture
def course_repo(database):
    return CourseRepository(database)


@pytest.fixture
def student_repo(database):
    return StudentRepository(database)


@pytest.fixture
def grade_repo(database):
    return GradeRepository(database)


@pytest.fixture
def service(database):
    return build_service(database)


@pytest.fixture
def broken_service():
    return build_service(BrokenDatabase())


@pytest.fixture
def settings(tmp_path):
    return Settings.model_validate({
        "database_path": str(tmp_path / "api.db"),
        "frontend_url": FRONTEND_URL,
    })


@pytest.fixture
def client(settings):
    platform = RosterPlatform(settings)
    with TestClient(platform.app) as test_client:
        yield test_client
    platform.shutdown()


@pytest.fixture
def broken_client():
    database = BrokenDatabase()
    api = RosterRestAPI(database, build_service(database), frontend_url=FRONTEND_URL)
    with TestClient(api.app) as test_client:
        yield test_client

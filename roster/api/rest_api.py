"""
REST API implementation for the Roster service using FastAPI.
"""

import asyncio
import logging
from typing import Any, Optional, Dict, List, Union
from datetime import datetime
from pydantic import BaseModel

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..core.exceptions import ValidationError, PersistenceError
from ..persistence import DatabaseManager
from ..services import RecordService


logger = logging.getLogger(__name__)


ENDPOINTS = {
    "students": "/students",
    "courses": "/courses",
    "grades": "/grades",
    "health": "/health",
}


# Pydantic models for API. Request fields are all optional so that a missing
# field reaches the record service and is reported as "<field> is required".
# email and score are left untyped; the record service decides what they accept.
class CourseCreate(BaseModel):
    name: Optional[str] = None


class CourseResponse(BaseModel):
    id: str
    name: str


class StudentCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[Any] = None
    course_id: Optional[str] = None


class StudentResponse(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    course_id: Optional[str] = None
    course_name: Optional[str] = None
    created_at: datetime


class GradeCreate(BaseModel):
    student_id: Optional[str] = None
    course_id: Optional[str] = None
    score: Optional[Any] = None


class GradeResponse(BaseModel):
    id: str
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    course_id: Optional[str] = None
    course_name: Optional[str] = None
    score: Union[int, float]
    created_at: datetime


class HealthResponse(BaseModel):
    status: str
    db: bool


class RootResponse(BaseModel):
    status: str
    usingDb: bool
    frontend: str
    endpoints: Dict[str, str]


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_error(exc: RequestValidationError) -> str:
    """Turn FastAPI's body validation errors into one client message."""
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if error.get("type") == "json_invalid":
            return "Request body must be valid JSON"
        if loc == ("body",):
            return "Request body must be a JSON object"
        if len(loc) >= 2 and loc[0] == "body":
            return f"{loc[1]} is invalid"
    return "Invalid request"


class RosterRestAPI:
    """REST API implementation for the Roster service."""
    
    def __init__(self, database: DatabaseManager, record_service: RecordService,
                 frontend_url: str):
        self._database = database
        self._records = record_service
        self._frontend_url = frontend_url
        
        # Create FastAPI app
        self.app = FastAPI(
            title="Roster API",
            description="Students, courses and grades, joined with the names they reference",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )
        
        # Only the configured frontend may call the API from a browser
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=[frontend_url],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
        
        self._setup_error_handlers()
        self._setup_routes()

    def _setup_error_handlers(self):
        """Render every error as ``{"error": message}``."""

        @self.app.exception_handler(StarletteHTTPException)
        async def http_error(request: Request, exc: StarletteHTTPException):
            # unknown method on a known path is reported like an unknown path
            if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
                return error_response(status.HTTP_404_NOT_FOUND, "Not found")
            return error_response(exc.status_code, str(exc.detail))

        @self.app.exception_handler(RequestValidationError)
        async def request_error(request: Request, exc: RequestValidationError):
            return error_response(status.HTTP_400_BAD_REQUEST, _describe_request_error(exc))
    
    def _setup_routes(self):
        """Setup API routes."""
        
        @self.app.get("/health", response_model=HealthResponse)
        async def health_check():
            """Health check endpoint."""
            db_ok = await asyncio.to_thread(self._database.ping)
            return {"status": "ok", "db": db_ok}

        @self.app.get("/", response_model=RootResponse)
        async def root():
            """Status summary and endpoint map."""
            db_ok = await asyncio.to_thread(self._database.ping)
            return {
                "status": "ok",
                "usingDb": db_ok,
                "frontend": self._frontend_url,
                "endpoints": ENDPOINTS,
            }
        
        # Student endpoints
        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(course_id: Optional[str] = None):
            """List all students with their course names."""
            try:
                return await self._records.list_students(course_id=course_id)
            except PersistenceError as e:
                logger.error("Error fetching students: %s", e)
                raise HTTPException(status_code=500, detail="Failed to fetch students")

        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: Optional[StudentCreate] = None):
            """Create a new student."""
            try:
                payload = student_data.model_dump() if student_data else {}
                return await self._records.create_student(payload)
            except ValidationError as e:
                logger.debug("Rejected student: %s", e)
                raise HTTPException(status_code=400, detail=e.message)
            except PersistenceError as e:
                logger.error("Error creating student: %s", e)
                raise HTTPException(status_code=500, detail="Failed to create student")
        
        # Course endpoints
        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses():
            """List all courses."""
            try:
                return await self._records.list_courses()
            except PersistenceError as e:
                logger.error("Error fetching courses: %s", e)
                raise HTTPException(status_code=500, detail="Failed to fetch courses")

        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: Optional[CourseCreate] = None):
            """Create a new course."""
            try:
                payload = course_data.model_dump() if course_data else {}
                return await self._records.create_course(payload)
            except ValidationError as e:
                logger.debug("Rejected course: %s", e)
                raise HTTPException(status_code=400, detail=e.message)
            except PersistenceError as e:
                logger.error("Error creating course: %s", e)
                raise HTTPException(status_code=500, detail="Failed to create course")

        # Grade endpoints
        @self.app.get("/grades", response_model=List[GradeResponse])
        async def list_grades(student_id: Optional[str] = None, course_id: Optional[str] = None):
            """List all grades with student and course names."""
            try:
                return await self._records.list_grades(student_id=student_id, course_id=course_id)
            except PersistenceError as e:
                logger.error("Error fetching grades: %s", e)
                raise HTTPException(status_code=500, detail="Failed to fetch grades")

        @self.app.post("/grades", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
        async def create_grade(grade_data: Optional[GradeCreate] = None):
            """Record a grade."""
            try:
                payload = grade_data.model_dump() if grade_data else {}
                return await self._records.create_grade(payload)
            except ValidationError as e:
                logger.debug("Rejected grade: %s", e)
                raise HTTPException(status_code=400, detail=e.message)
            except PersistenceError as e:
                logger.error("Error creating grade: %s", e)
                raise HTTPException(status_code=500, detail="Failed to create grade")

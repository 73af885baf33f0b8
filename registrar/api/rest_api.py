"""
REST API for the registrar using FastAPI.
"""

import logging
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from pydantic import BaseModel, Field

from fastapi import FastAPI, HTTPException, status

from .. import __version__
from ..core.entities import Course, Student
from ..core.exceptions import ValidationError, ResourceNotFoundError
from ..factory import RegistrarFactory
from ..services import EnrollmentService, EnrollmentResult, EventLog

logger = logging.getLogger(__name__)


# Pydantic models for API
class StudentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class StudentResponse(BaseModel):
    id: str
    name: str
    courses: List[str] = []
    created_at: datetime
    updated_at: datetime
    version: int


class CourseCreate(BaseModel):
    catalog_number: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    enrollment_limit: Optional[int] = Field(None, ge=0)


class CourseResponse(BaseModel):
    id: str
    catalog_number: str
    title: str
    enrollment_limit: Optional[int] = None
    students: List[str] = []
    waitlist: List[str] = []
    is_full: bool
    created_at: datetime
    updated_at: datetime
    version: int


class EnrollmentLimitUpdate(BaseModel):
    enrollment_limit: int = Field(..., ge=0)


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    course_id: str = Field(..., min_length=1)


class EnrollmentResponse(BaseModel):
    success: bool
    message: str
    status: str
    waitlist_position: Optional[int] = None
    promoted: List[str] = []


class EventResponse(BaseModel):
    id: str
    event_type: str
    stream_id: str
    event_data: Dict[str, Any]
    created_at: datetime


class RegistrarRestAPI:
    """REST API over an in-memory registrar."""

    def __init__(self, factory: RegistrarFactory, enrollment_service: EnrollmentService,
                 event_log: Optional[EventLog] = None):
        self._factory = factory
        self._enrollment_service = enrollment_service
        self._event_log = event_log

        self.app = FastAPI(
            title="Registrar API",
            description="Course registration with enrollment limits and waitlists",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Create a new student."""
            student = self._factory.make_student(student_data.name)
            return self._student_to_response(student)

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        async def get_student(student_id: str):
            """Get a student by ID."""
            return self._student_to_response(self._find_student(student_id))

        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(skip: int = 0, limit: int = 100):
            """List all students."""
            students = self._factory.all_students()[skip:skip + limit]
            return [self._student_to_response(student) for student in students]

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Create a new course."""
            try:
                course = self._factory.make_course(
                    course_data.catalog_number,
                    course_data.title,
                    enrollment_limit=course_data.enrollment_limit
                )
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return self._course_to_response(course)

        @self.app.get("/courses/{course_id}", response_model=CourseResponse)
        async def get_course(course_id: str):
            """Get a course by ID."""
            return self._course_to_response(self._find_course(course_id))

        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(skip: int = 0, limit: int = 100):
            """List all courses."""
            courses = self._factory.all_courses()[skip:skip + limit]
            return [self._course_to_response(course) for course in courses]

        @self.app.put("/courses/{course_id}/enrollment-limit", response_model=EnrollmentResponse)
        async def set_enrollment_limit(course_id: str, limit_data: EnrollmentLimitUpdate):
            """Change a course's enrollment limit."""
            course = self._find_course(course_id)
            try:
                result = self._enrollment_service.change_enrollment_limit(course, limit_data.enrollment_limit)
            except ValidationError as e:
                raise HTTPException(status_code=400, detail=str(e))
            if not result.success:
                raise HTTPException(status_code=409, detail=result.message)
            return self._result_to_response(result)

        @self.app.delete("/courses/{course_id}/enrollment-limit", response_model=EnrollmentResponse)
        async def remove_enrollment_limit(course_id: str):
            """Remove a course's enrollment limit."""
            course = self._find_course(course_id)
            result = self._enrollment_service.change_enrollment_limit(course, None)
            return self._result_to_response(result)

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse)
        async def enroll_student(request: EnrollmentRequest):
            """Enroll a student in a course, or waitlist them if it is full."""
            student = self._find_student(request.student_id)
            course = self._find_course(request.course_id)
            result = self._enrollment_service.enroll_student(student, course)
            return self._result_to_response(result)

        @self.app.delete("/courses/{course_id}/students/{student_id}", response_model=EnrollmentResponse)
        async def drop_student(course_id: str, student_id: str):
            """Drop a student from a course or its waitlist."""
            course = self._find_course(course_id)
            student = self._find_student(student_id)
            result = self._enrollment_service.drop_student(student, course)
            return self._result_to_response(result)

        @self.app.get("/events", response_model=List[EventResponse])
        async def list_events(course_id: Optional[str] = None):
            """List recorded registration events."""
            if self._event_log is None:
                return []
            course = self._find_course(course_id) if course_id else None
            return [
                EventResponse(
                    id=event.id,
                    event_type=event.event_type.value,
                    stream_id=event.stream_id,
                    event_data=event.event_data,
                    created_at=event.created_at
                )
                for event in self._event_log.get_events(course)
            ]

    def _find_student(self, student_id: str) -> Student:
        try:
            return self._factory.find_student(student_id)
        except ResourceNotFoundError:
            raise HTTPException(status_code=404, detail="Student not found")

    def _find_course(self, course_id: str) -> Course:
        try:
            return self._factory.find_course(course_id)
        except ResourceNotFoundError:
            raise HTTPException(status_code=404, detail="Course not found")

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert student entity to response model."""
        return StudentResponse(
            id=student.id,
            name=student.name,
            courses=sorted(course.id for course in student.get_courses()),
            created_at=student.created_at,
            updated_at=student.updated_at,
            version=student.version
        )

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert course entity to response model."""
        return CourseResponse(
            id=course.id,
            catalog_number=course.catalog_number,
            title=course.title,
            enrollment_limit=None if course.has_unlimited_enrollment else course.enrollment_limit,
            students=sorted(student.id for student in course.get_students()),
            waitlist=[student.id for student in course.get_waitlist()],
            is_full=course.is_full,
            created_at=course.created_at,
            updated_at=course.updated_at,
            version=course.version
        )

    def _result_to_response(self, result: EnrollmentResult) -> EnrollmentResponse:
        return EnrollmentResponse(
            success=result.success,
            message=result.message,
            status=result.status.value,
            waitlist_position=result.waitlist_position,
            promoted=result.metadata.get('promoted', [])
        )

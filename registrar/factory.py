"""
Construction helper and in-memory registry for students and courses.
"""

import logging
from typing import Dict, List, Optional

from .core.entities import Course, Student
from .core.exceptions import ConfigurationError, ResourceNotFoundError
from .core.invariants import assert_invariants, check_invariants

logger = logging.getLogger(__name__)


class RegistrarFactory:
    """Builds students and courses and remembers everything it built."""

    def __init__(self, default_enrollment_limit: Optional[int] = None):
        if default_enrollment_limit is not None and (
                isinstance(default_enrollment_limit, bool)
                or not isinstance(default_enrollment_limit, int)
                or default_enrollment_limit < 0):
            raise ConfigurationError(
                f"default_enrollment_limit must be a non-negative integer: {default_enrollment_limit!r}")
        self._default_enrollment_limit = default_enrollment_limit
        self._students: Dict[str, Student] = {}
        self._courses: Dict[str, Course] = {}

    def make_student(self, name: str) -> Student:
        """Create and register a student."""
        student = Student()
        student.set_name(name)
        self._students[student.id] = student
        logger.debug("Created student %s (%s)", name, student.id)
        return student

    def make_course(self, catalog_number: str, title: str,
                    enrollment_limit: Optional[int] = None) -> Course:
        """Create and register a course.

        Without an explicit limit the factory default applies, and without
        a factory default the course is unbounded.
        """
        course = Course()
        course.set_catalog_number(catalog_number)
        course.set_title(title)
        if enrollment_limit is None:
            enrollment_limit = self._default_enrollment_limit
        if enrollment_limit is not None:
            course.set_enrollment_limit(enrollment_limit)
        self._courses[course.id] = course
        logger.debug("Created course %s (%s)", course, course.id)
        return course

    def enroll_multiple_students(self, course: Course, count: int) -> List[Student]:
        """Enroll ``count`` fresh anonymous students in a course."""
        students = []
        for number in range(count, 0, -1):
            student = self.make_student(f"Anonymous student {number}")
            student.enroll_in(course)
            students.append(student)
        return students

    def all_students(self) -> List[Student]:
        return list(self._students.values())

    def all_courses(self) -> List[Course]:
        return list(self._courses.values())

    def find_student(self, student_id: str) -> Student:
        try:
            return self._students[student_id]
        except KeyError:
            raise ResourceNotFoundError(f"Student not found: {student_id}",
                                        error_code="student_not_found") from None

    def find_course(self, course_id: str) -> Course:
        try:
            return self._courses[course_id]
        except KeyError:
            raise ResourceNotFoundError(f"Course not found: {course_id}",
                                        error_code="course_not_found") from None

    def check_invariants(self) -> List[str]:
        """Return every invariant violation among registered entities."""
        return check_invariants(self.all_students(), self.all_courses())

    def assert_invariants(self) -> None:
        assert_invariants(self.all_students(), self.all_courses())

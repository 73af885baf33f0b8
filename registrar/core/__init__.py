"""
Core module containing the registration object model.
"""

from .entities import AbstractEntity, Course, Student, Event, UNLIMITED
from .interfaces import EventHandler
from .exceptions import (
    RegistrarException, ValidationError, InvalidArgumentError,
    ResourceNotFoundError, InvariantViolationError, ConfigurationError,
)
from .enums import EntityStatus, EnrollmentStatus, EventType
from .invariants import (
    check_student_invariants, check_course_invariants, check_invariants, assert_invariants,
)

__all__ = [
    # Entities
    "AbstractEntity",
    "Course",
    "Student",
    "Event",
    "UNLIMITED",

    # Interfaces
    "EventHandler",

    # Enums
    "EntityStatus",
    "EnrollmentStatus",
    "EventType",

    # Exceptions
    "RegistrarException",
    "ValidationError",
    "InvalidArgumentError",
    "ResourceNotFoundError",
    "InvariantViolationError",
    "ConfigurationError",

    # Invariants
    "check_student_invariants",
    "check_course_invariants",
    "check_invariants",
    "assert_invariants",
]

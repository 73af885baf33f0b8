"""
Core entities for the registrar: students, courses and registration events.

A Course is the single source of truth for who is enrolled in it. Whenever
its roster changes it calls back into the affected Student so the student's
own course set mirrors the roster. Promotion off the waitlist goes through
the same ``Course.enroll`` acceptance logic as a fresh enrollment.
"""

import logging
import sys
import uuid
from abc import ABC
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple

from .enums import EntityStatus, EventType
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

# Enrollment limit of a course that has none.
UNLIMITED = sys.maxsize


class AbstractEntity(ABC):
    """Base abstract entity with universal ID, lifecycle, and versioning."""

    def __init__(self, entity_id: Optional[str] = None):
        self._id = entity_id or str(uuid.uuid4())
        self._created_at = datetime.now(timezone.utc)
        self._updated_at = self._created_at
        self._version = 1
        self._status = EntityStatus.ACTIVE

    @property
    def id(self) -> str:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    @property
    def version(self) -> int:
        """Get current version."""
        return self._version

    @property
    def status(self) -> EntityStatus:
        """Get entity status."""
        return self._status

    def update(self) -> None:
        """Record a mutation."""
        self._updated_at = datetime.now(timezone.utc)
        self._version += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
            'updated_at': self._updated_at.isoformat(),
            'version': self._version,
            'status': self._status.value,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, status={self._status.value})"


class Course(AbstractEntity):
    """A course with a bounded roster and a FIFO waitlist."""

    def __init__(self, catalog_number: Optional[str] = None, title: Optional[str] = None,
                 enrollment_limit: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        self._catalog_number = catalog_number
        self._title: Optional[str] = None
        self._enrollment_limit = UNLIMITED
        self._roster: Set['Student'] = set()
        self._waitlist: List['Student'] = []

        if title is not None:
            self.set_title(title)
        if enrollment_limit is not None:
            self.set_enrollment_limit(enrollment_limit)

    @property
    def catalog_number(self) -> Optional[str]:
        return self._catalog_number

    @property
    def title(self) -> Optional[str]:
        return self._title

    @property
    def enrollment_limit(self) -> int:
        return self._enrollment_limit

    @property
    def has_unlimited_enrollment(self) -> bool:
        return self._enrollment_limit == UNLIMITED

    @property
    def students(self) -> FrozenSet['Student']:
        return self.get_students()

    @property
    def waitlist(self) -> Tuple['Student', ...]:
        return self.get_waitlist()

    @property
    def enrolled_count(self) -> int:
        return len(self._roster)

    @property
    def waitlist_count(self) -> int:
        return len(self._waitlist)

    @property
    def is_full(self) -> bool:
        return len(self._roster) >= self._enrollment_limit

    def set_catalog_number(self, catalog_number: str) -> None:
        """Set the catalog number."""
        self._catalog_number = catalog_number
        self.update()

    def set_title(self, title: str) -> None:
        """Set the course title."""
        if title is None:
            raise InvalidArgumentError("course title cannot be null")
        if not isinstance(title, str) or not title.strip():
            raise InvalidArgumentError(f"course title cannot be empty: {title!r}")
        self._title = title
        self.update()

    def set_enrollment_limit(self, limit: int) -> bool:
        """Change the enrollment limit.

        Raising the limit promotes waitlisted students, oldest first, until
        the course is full again or nobody is waiting. A limit below the
        number of students already enrolled is refused and leaves the course
        untouched.

        Returns:
            True if the limit was changed, False if it was refused.
        """
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidArgumentError(f"enrollment limit must be an integer: {limit!r}")
        if limit < 0:
            raise InvalidArgumentError(f"course cannot have negative enrollment limit: {limit}")

        if limit < len(self._roster):
            logger.debug("Refusing limit %d for %s: %d students enrolled", limit, self, len(self._roster))
            return False

        old_limit = self._enrollment_limit
        self._enrollment_limit = limit
        self.update()
        logger.debug("Enrollment limit of %s changed from %d to %d", self, old_limit, limit)

        self._fill_from_waitlist()
        return True

    def remove_enrollment_limit(self) -> None:
        """Make enrollment unbounded, admitting everyone on the waitlist."""
        self.set_enrollment_limit(UNLIMITED)

    def get_students(self) -> FrozenSet['Student']:
        """Get the students enrolled in this course."""
        return frozenset(self._roster)

    def get_waitlist(self) -> Tuple['Student', ...]:
        """Get waitlisted students, first in line first."""
        return tuple(self._waitlist)

    def waitlist_position(self, student: 'Student') -> Optional[int]:
        """Get the 1-based waitlist position of a student, or None."""
        if student not in self._waitlist:
            return None
        return self._waitlist.index(student) + 1

    def enroll(self, student: 'Student') -> bool:
        """Enroll a student. Returns True if enrolled, False if waitlisted."""
        if student in self._roster:
            return True

        if self.is_full:
            self._add_to_waitlist(student)
            return False

        self._roster.add(student)
        student._attach_course(self)
        self.update()
        logger.debug("%s enrolled in %s", student, self)
        return True

    def drop_student(self, student: 'Student') -> None:
        """Remove a student from the roster or the waitlist.

        A seat freed on the roster goes to the head of the waitlist.
        Dropping a student who is in neither is a no-op.
        """
        if student in self._waitlist:
            self._waitlist.remove(student)
            self.update()
            logger.debug("%s removed from waitlist of %s", student, self)

        if student in self._roster:
            self._roster.remove(student)
            student._detach_course(self)
            self.update()
            logger.debug("%s dropped %s", student, self)
            self._fill_from_waitlist()

    def _add_to_waitlist(self, student: 'Student') -> None:
        if student not in self._waitlist:
            self._waitlist.append(student)
            self.update()
            logger.debug("%s waitlisted for %s at position %d", student, self, len(self._waitlist))

    def _enroll_next_from_waitlist(self) -> 'Student':
        student = self._waitlist.pop(0)
        self.enroll(student)
        logger.debug("%s promoted from waitlist of %s", student, self)
        return student

    def _fill_from_waitlist(self) -> List['Student']:
        promoted = []
        while self._waitlist and not self.is_full:
            promoted.append(self._enroll_next_from_waitlist())
        return promoted

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'catalog_number': self._catalog_number,
            'title': self._title,
            'enrollment_limit': None if self.has_unlimited_enrollment else self._enrollment_limit,
            'students': sorted(student.id for student in self._roster),
            'waitlist': [student.id for student in self._waitlist],
        })
        return base_dict

    def __str__(self) -> str:
        return f"{self._title} ({self._catalog_number})"


class Student(AbstractEntity):
    """A student and the courses they are enrolled in.

    The course set only changes through Course callbacks, so it always
    matches the rosters. Waitlisted courses are not included.
    """

    def __init__(self, name: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._name = name
        self._courses: Set[Course] = set()

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def courses(self) -> FrozenSet[Course]:
        return self.get_courses()

    def set_name(self, name: str) -> None:
        """Set the student's name."""
        self._name = name
        self.update()

    def get_courses(self) -> FrozenSet[Course]:
        """Get the courses this student is enrolled in."""
        return frozenset(self._courses)

    def is_enrolled_in(self, course: Course) -> bool:
        return course in self._courses

    def is_waitlisted_for(self, course: Course) -> bool:
        return course.waitlist_position(self) is not None

    def enroll_in(self, course: Course) -> bool:
        """Enroll in a course. Returns True if enrolled, False if waitlisted."""
        return course.enroll(self)

    def drop(self, course: Course) -> None:
        """Drop a course, or leave its waitlist."""
        self._detach_course(course)
        course.drop_student(self)

    def _attach_course(self, course: Course) -> None:
        if course not in self._courses:
            self._courses.add(course)
            self.update()

    def _detach_course(self, course: Course) -> None:
        if course in self._courses:
            self._courses.discard(course)
            self.update()

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'courses': sorted(course.id for course in self._courses),
        })
        return base_dict

    def __str__(self) -> str:
        return self._name if self._name is not None else f"Student({self._id})"


class Event(AbstractEntity):
    """Record of a registration change."""

    def __init__(self, event_type: EventType, stream_id: str,
                 event_data: Dict[str, Any], **kwargs):
        super().__init__(**kwargs)
        self._event_type = event_type
        self._stream_id = stream_id
        self._event_data = dict(event_data)

    @property
    def event_type(self) -> EventType:
        return self._event_type

    @property
    def stream_id(self) -> str:
        return self._stream_id

    @property
    def event_data(self) -> Dict[str, Any]:
        return self._event_data.copy()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        base_dict = super().to_dict()
        base_dict.update({
            'event_type': self._event_type.value,
            'stream_id': self._stream_id,
            'event_data': self._event_data.copy(),
        })
        return base_dict

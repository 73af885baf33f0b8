"""
Enrollment service: registration operations with results and an event trail.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.entities import Course, Student, Event
from ..core.enums import EnrollmentStatus, EventType
from ..core.interfaces import EventHandler

logger = logging.getLogger(__name__)


@dataclass
class EnrollmentResult:
    """Result of an enrollment operation."""
    success: bool
    status: EnrollmentStatus
    message: str
    waitlist_position: Optional[int] = None
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


class EventLog(EventHandler):
    """Event handler that keeps every registration event in memory."""

    def __init__(self, event_types: Optional[List[EventType]] = None):
        self._event_types = {event_type.value for event_type in event_types} if event_types else None
        self._events: List[Event] = []

    def handle_event(self, event: Event) -> None:
        self._events.append(event)

    def can_handle(self, event_type: str) -> bool:
        return self._event_types is None or event_type in self._event_types

    def get_events(self, course: Optional[Course] = None) -> List[Event]:
        """Get recorded events, optionally only those of one course."""
        if course is None:
            return list(self._events)
        stream_id = _stream_id(course)
        return [event for event in self._events if event.stream_id == stream_id]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


def _stream_id(course: Course) -> str:
    return f"course_{course.id}"


class EnrollmentService:
    """Service for managing student enrollments with an event trail."""

    def __init__(self, event_handlers: Optional[List[EventHandler]] = None):
        self._event_handlers: List[EventHandler] = list(event_handlers or [])
        self._statistics = {
            'enrollments': 0,
            'waitlisted': 0,
            'promotions': 0,
            'drops': 0,
            'limit_changes': 0,
            'rejected_limit_changes': 0,
        }

    def add_event_handler(self, handler: EventHandler) -> None:
        """Add an event handler."""
        self._event_handlers.append(handler)

    def enroll_student(self, student: Student, course: Course) -> EnrollmentResult:
        """Enroll a student in a course, waitlisting them if it is full."""
        if student in course.get_students():
            return EnrollmentResult(
                success=True,
                status=EnrollmentStatus.CONFIRMED,
                message="Student already enrolled"
            )

        existing_position = course.waitlist_position(student)
        if existing_position is not None:
            return EnrollmentResult(
                success=False,
                status=EnrollmentStatus.WAITLISTED,
                message=f"Student already waitlisted at position {existing_position}",
                waitlist_position=existing_position
            )

        if student.enroll_in(course):
            self._statistics['enrollments'] += 1
            self._publish_event(EventType.ENROLLED, course, {
                'student_id': student.id,
                'student_name': student.name,
            })
            logger.info("%s enrolled in %s", student, course)
            return EnrollmentResult(
                success=True,
                status=EnrollmentStatus.CONFIRMED,
                message="Student enrolled successfully"
            )

        waitlist_position = course.waitlist_position(student)
        self._statistics['waitlisted'] += 1
        self._publish_event(EventType.WAITLISTED, course, {
            'student_id': student.id,
            'student_name': student.name,
            'waitlist_position': waitlist_position,
        })
        logger.info("%s waitlisted for %s at position %s", student, course, waitlist_position)
        return EnrollmentResult(
            success=False,
            status=EnrollmentStatus.WAITLISTED,
            message=f"Student added to waitlist at position {waitlist_position}",
            waitlist_position=waitlist_position
        )

    def drop_student(self, student: Student, course: Course) -> EnrollmentResult:
        """Drop a student from a course or its waitlist."""
        was_enrolled = student in course.get_students()
        was_waitlisted = course.waitlist_position(student) is not None
        waiting = course.get_waitlist()

        student.drop(course)

        if not (was_enrolled or was_waitlisted):
            return EnrollmentResult(
                success=False,
                status=EnrollmentStatus.DROPPED,
                message="Student not enrolled or waitlisted in this course"
            )

        self._statistics['drops'] += 1
        self._publish_event(EventType.DROPPED, course, {
            'student_id': student.id,
            'student_name': student.name,
            'was_enrolled': was_enrolled,
        })
        logger.info("%s dropped %s", student, course)

        promoted = self._record_promotions(course, waiting)
        return EnrollmentResult(
            success=True,
            status=EnrollmentStatus.DROPPED,
            message="Student dropped successfully",
            metadata={'promoted': [str(s) for s in promoted]}
        )

    def change_enrollment_limit(self, course: Course, limit: Optional[int]) -> EnrollmentResult:
        """Change a course's enrollment limit. None removes the limit."""
        old_limit = course.enrollment_limit
        waiting = course.get_waitlist()

        if limit is None:
            course.remove_enrollment_limit()
            changed = True
        else:
            changed = course.set_enrollment_limit(limit)

        if not changed:
            self._statistics['rejected_limit_changes'] += 1
            logger.info("Refused enrollment limit %s for %s", limit, course)
            return EnrollmentResult(
                success=False,
                status=EnrollmentStatus.REJECTED,
                message=f"Cannot lower enrollment limit below {course.enrolled_count} enrolled students"
            )

        self._statistics['limit_changes'] += 1
        self._publish_event(EventType.LIMIT_CHANGED, course, {
            'old_limit': old_limit,
            'new_limit': course.enrollment_limit,
        })
        logger.info("Enrollment limit of %s changed to %s", course, limit if limit is not None else "unlimited")

        promoted = self._record_promotions(course, waiting)
        return EnrollmentResult(
            success=True,
            status=EnrollmentStatus.LIMIT_CHANGED,
            message="Enrollment limit changed",
            metadata={'promoted': [str(s) for s in promoted]}
        )

    def get_waitlist_position(self, student: Student, course: Course) -> Optional[int]:
        """Get student's position on the waitlist."""
        return course.waitlist_position(student)

    def get_statistics(self) -> Dict[str, Any]:
        """Get enrollment statistics."""
        statistics = dict(self._statistics)
        statistics['event_handlers'] = len(self._event_handlers)
        return statistics

    def _record_promotions(self, course: Course, waiting) -> List[Student]:
        roster = course.get_students()
        promoted = [student for student in waiting if student in roster]
        for student in promoted:
            self._statistics['promotions'] += 1
            self._publish_event(EventType.PROMOTED, course, {
                'student_id': student.id,
                'student_name': student.name,
            })
            logger.info("%s promoted from waitlist into %s", student, course)
        return promoted

    def _publish_event(self, event_type: EventType, course: Course, event_data: Dict[str, Any]) -> None:
        """Publish an event to all handlers."""
        event_data = dict(event_data, course_id=course.id, catalog_number=course.catalog_number)
        event = Event(
            event_type=event_type,
            stream_id=_stream_id(course),
            event_data=event_data
        )

        for handler in self._event_handlers:
            if handler.can_handle(event_type.value):
                try:
                    handler.handle_event(event)
                except Exception:
                    logger.exception("Error in event handler %s", handler.__class__.__name__)

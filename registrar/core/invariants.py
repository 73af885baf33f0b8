"""
Consistency checks between students and courses.

These are the rules every sequence of enroll, drop and limit changes must
preserve. They are cheap enough to run after each test, and the factory
exposes them for scanning everything it has built.
"""

from typing import Iterable, List

from .entities import Course, Student
from .exceptions import InvariantViolationError


def check_student_invariants(student: Student) -> List[str]:
    """Return violations visible from a student's side."""
    violations = []
    for course in student.get_courses():
        if student not in course.get_students():
            violations.append(
                f"{student} thinks they are enrolled in {course}, "
                f"but {course} does not have them in the list of students")
    return violations


def check_course_invariants(course: Course) -> List[str]:
    """Return violations visible from a course's side."""
    violations = []
    roster = course.get_students()
    waitlist = course.get_waitlist()

    unique_waitlist = set(waitlist)
    if len(unique_waitlist) != len(waitlist):
        violations.append(f"{course} wait list contains duplicates: {[str(s) for s in waitlist]}")

    both = unique_waitlist & roster
    if both:
        violations.append(
            f"{course} contains students who are both registered and waitlisted: "
            f"{sorted(str(s) for s in both)}")

    for student in roster:
        if course not in student.get_courses():
            violations.append(
                f"{course} thinks {student} is enrolled, "
                f"but {student} doesn't think they're in the class")

    for student in waitlist:
        if course in student.get_courses():
            violations.append(
                f"{course} lists {student} as waitlisted, but {student} thinks they are enrolled")

    if len(roster) > course.enrollment_limit:
        violations.append(
            f"{course} has an enrollment limit of {course.enrollment_limit}, "
            f"but has {len(roster)} students")

    if len(roster) < course.enrollment_limit and waitlist:
        violations.append(f"{course} is not full, but has students waitlisted")

    return violations


def check_invariants(students: Iterable[Student], courses: Iterable[Course]) -> List[str]:
    """Return every violation across the given students and courses."""
    violations = []
    for student in students:
        violations.extend(check_student_invariants(student))
    for course in courses:
        violations.extend(check_course_invariants(course))
    return violations


def assert_invariants(students: Iterable[Student], courses: Iterable[Course]) -> None:
    """Raise InvariantViolationError if any check fails."""
    violations = check_invariants(students, courses)
    if violations:
        raise InvariantViolationError(violations)

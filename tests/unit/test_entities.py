"""Unit tests for Course and Student entities."""

import pytest

from registrar.core import (
    UNLIMITED,
    Course,
    EntityStatus,
    InvalidArgumentError,
    Student,
    ValidationError,
)

pytestmark = pytest.mark.unit


class TestCourse:
    def test_new_course_is_unbounded_and_empty(self):
        course = Course()
        assert course.enrollment_limit == UNLIMITED
        assert course.has_unlimited_enrollment
        assert course.get_students() == frozenset()
        assert course.get_waitlist() == ()
        assert not course.is_full
        assert course.status == EntityStatus.ACTIVE

    def test_constructor_arguments(self):
        course = Course("COMP 225", "Software Fun Fun", enrollment_limit=3)
        assert course.catalog_number == "COMP 225"
        assert course.title == "Software Fun Fun"
        assert course.enrollment_limit == 3

    def test_str(self):
        assert str(Course("COMP 225", "Software Fun Fun")) == "Software Fun Fun (COMP 225)"

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_set_title_rejects_missing_title(self, title):
        course = Course("COMP 225", "Software Fun Fun")
        with pytest.raises(InvalidArgumentError):
            course.set_title(title)
        assert course.title == "Software Fun Fun"

    def test_invalid_argument_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            Course().set_title(None)
        assert exc_info.value.error_code == "invalid_argument"

    def test_set_negative_limit_raises(self):
        course = Course()
        with pytest.raises(InvalidArgumentError, match="negative enrollment limit: -1"):
            course.set_enrollment_limit(-1)
        assert course.has_unlimited_enrollment

    @pytest.mark.parametrize("limit", [1.5, "16", True, None])
    def test_set_non_integer_limit_raises(self, limit):
        with pytest.raises(InvalidArgumentError):
            Course().set_enrollment_limit(limit)

    def test_zero_limit_is_full(self):
        course = Course()
        course.set_enrollment_limit(0)
        assert course.is_full

    def test_views_cannot_mutate_course(self):
        course = Course("COMP 225", "Software Fun Fun", enrollment_limit=1)
        first, second = Student("First"), Student("Second")
        first.enroll_in(course)
        second.enroll_in(course)

        students = course.get_students()
        waitlist = course.get_waitlist()
        with pytest.raises(AttributeError):
            students.add(second)
        with pytest.raises(AttributeError):
            waitlist.append(first)
        assert course.students == {first}
        assert course.waitlist == (second,)

    def test_waitlist_position(self):
        course = Course("COMP 225", "Software Fun Fun", enrollment_limit=0)
        a, b = Student("A"), Student("B")
        a.enroll_in(course)
        b.enroll_in(course)
        assert course.waitlist_position(a) == 1
        assert course.waitlist_position(b) == 2
        assert course.waitlist_position(Student("C")) is None
        assert course.waitlist_count == 2

    def test_enroll_called_on_course_updates_student(self):
        course = Course("COMP 225", "Software Fun Fun")
        student = Student("Sally")
        assert course.enroll(student) is True
        assert course in student.get_courses()

    def test_drop_student_called_on_course_updates_student(self):
        course = Course("COMP 225", "Software Fun Fun")
        student = Student("Sally")
        student.enroll_in(course)
        course.drop_student(student)
        assert course not in student.get_courses()
        assert student not in course.get_students()

    def test_drop_student_not_present_is_no_op(self):
        course = Course("COMP 225", "Software Fun Fun")
        version = course.version
        course.drop_student(Student("Nobody"))
        assert course.version == version

    def test_mutations_bump_version(self):
        course = Course()
        version = course.version
        course.set_title("Software Fun Fun")
        course.enroll(Student("Sally"))
        assert course.version == version + 2
        assert course.updated_at >= course.created_at

    def test_to_dict(self):
        course = Course("COMP 225", "Software Fun Fun", enrollment_limit=1)
        enrolled, waiting = Student("Sally"), Student("Fred")
        enrolled.enroll_in(course)
        waiting.enroll_in(course)

        data = course.to_dict()
        assert data['catalog_number'] == "COMP 225"
        assert data['title'] == "Software Fun Fun"
        assert data['enrollment_limit'] == 1
        assert data['students'] == [enrolled.id]
        assert data['waitlist'] == [waiting.id]
        assert data['status'] == "active"

    def test_to_dict_reports_unbounded_limit_as_none(self):
        assert Course("Math 6", "All About the Number Six").to_dict()['enrollment_limit'] is None


class TestStudent:
    def test_new_student(self):
        student = Student()
        student.set_name("Sally")
        assert student.name == "Sally"
        assert str(student) == "Sally"
        assert student.get_courses() == frozenset()

    def test_str_without_name_uses_id(self):
        student = Student()
        assert student.id in str(student)

    def test_students_are_distinct_by_identity(self):
        assert Student("Sally") != Student("Sally")
        assert len({Student("Sally"), Student("Sally")}) == 2

    def test_enroll_in_and_waitlist_helpers(self):
        course = Course("COMP 225", "Software Fun Fun", enrollment_limit=1)
        enrolled, waiting = Student("Sally"), Student("Fred")
        enrolled.enroll_in(course)
        waiting.enroll_in(course)

        assert enrolled.is_enrolled_in(course)
        assert not enrolled.is_waitlisted_for(course)
        assert waiting.is_waitlisted_for(course)
        assert not waiting.is_enrolled_in(course)

    def test_courses_view_is_read_only(self):
        student = Student("Sally")
        student.enroll_in(Course("COMP 225", "Software Fun Fun"))
        with pytest.raises(AttributeError):
            student.get_courses().clear()
        assert len(student.courses) == 1

    def test_drop_leaves_waitlist(self):
        course = Course("COMP 225", "Software Fun Fun", enrollment_limit=0)
        student = Student("Sally")
        student.enroll_in(course)
        student.drop(course)
        assert course.get_waitlist() == ()

    def test_to_dict(self):
        course = Course("COMP 225", "Software Fun Fun")
        student = Student("Sally")
        student.enroll_in(course)
        data = student.to_dict()
        assert data['name'] == "Sally"
        assert data['courses'] == [course.id]


def test_entity_status_values():
    assert [status.value for status in EntityStatus] == ["active"]
    assert Student("Sally").to_dict()['status'] == "active"

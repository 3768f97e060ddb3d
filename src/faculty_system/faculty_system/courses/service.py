from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import coerce_id, is_blank, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..departments.repository import DepartmentRepository
from ..users.repository import UserRepository
from .access import ensure_teaches, load_course
from .model import Course, RosterStudent
from .repository import CourseRepository

logger = logging.getLogger(__name__)


class CourseService:
    """Course catalogue and roster membership."""

    def __init__(self, courses: CourseRepository, users: UserRepository, departments: DepartmentRepository):
        self._courses = courses
        self._users = users
        self._departments = departments

    def create_course(
        self, *, code: str, name: str, description: Optional[str] = None, credits=3, department_id=None
    ) -> int:
        code = require_non_empty(code, "Code").upper()
        name = require_non_empty(name, "Name")
        try:
            credits = int(credits)
        except (TypeError, ValueError):
            raise ValidationError("Credits must be a number")
        if credits <= 0:
            raise ValidationError("Credits must be positive")

        if self._courses.get_by_code(code):
            raise ValidationError("Course code already exists")

        department = None
        if not is_blank(department_id):
            department = coerce_id(department_id)
            if department is None:
                raise ValidationError("departmentId is not valid")
            if not self._departments.get_by_id(department):
                raise NotFoundError("Department not found")

        description = (description or "").strip() or None
        return self._courses.create_course(
            code=code, name=name, description=description, credits=credits, department_id=department
        )

    def _require_role(self, user_ids: Sequence[int], role: Role) -> list[int]:
        unique_ids = list(dict.fromkeys(int(i) for i in user_ids))
        found = {u.user_id: u for u in self._users.get_many(unique_ids)}
        wrong = [i for i in unique_ids if i not in found or found[i].role != role]
        if wrong:
            raise ValidationError(f"Not {role.value} accounts: {', '.join(str(i) for i in wrong)}")
        return unique_ids

    def enroll_students(self, *, course_id, student_ids: Sequence[int]) -> int:
        course = load_course(self._courses, course_id)
        ids = self._require_role(student_ids, Role.STUDENT)
        added = self._courses.add_students(course_id=course.course_id, student_ids=ids)
        logger.info("Enrolled %d new students in course %s", added, course.course_id)
        return added

    def unenroll_students(self, *, course_id, student_ids: Sequence[int]) -> int:
        """Take students off the roster. Recorded attendance and grades are kept."""
        course = load_course(self._courses, course_id)
        ids = list(dict.fromkeys(int(i) for i in student_ids))
        removed = self._courses.remove_students(course_id=course.course_id, student_ids=ids)
        logger.info("Unenrolled %d students from course %s", removed, course.course_id)
        return removed

    def assign_professors(self, *, course_id, professor_ids: Sequence[int]) -> int:
        course = load_course(self._courses, course_id)
        ids = self._require_role(professor_ids, Role.PROFESSOR)
        added = self._courses.add_professors(course_id=course.course_id, professor_ids=ids)
        logger.info("Assigned %d new professors to course %s", added, course.course_id)
        return added

    def list_my_courses(self, professor_id: int) -> Sequence[Course]:
        return self._courses.list_for_professor(int(professor_id))

    def list_course_students(self, *, caller_id: int, course_id) -> Sequence[RosterStudent]:
        course = load_course(self._courses, course_id)
        ensure_teaches(self._courses, course, caller_id)
        return self._courses.get_roster(course.course_id)

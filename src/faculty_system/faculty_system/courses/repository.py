from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course, RosterStudent


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Course]:
        raise NotImplementedError

    def create_course(
        self, *, code: str, name: str, description: Optional[str], credits: int, department_id: Optional[int] = None
    ) -> int:
        raise NotImplementedError

    def get_roster(self, course_id: int) -> Sequence[RosterStudent]:
        """Enrolled students ordered by name."""

        raise NotImplementedError

    def get_professor_ids(self, course_id: int) -> set[int]:
        raise NotImplementedError

    def add_students(self, *, course_id: int, student_ids: Sequence[int]) -> int:
        """Enroll students (set semantics). Returns how many were newly added."""

        raise NotImplementedError

    def remove_students(self, *, course_id: int, student_ids: Sequence[int]) -> int:
        """Drop students from the roster. Their ledger and grade history stay. Returns how many were removed."""

        raise NotImplementedError

    def add_professors(self, *, course_id: int, professor_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def list_for_professor(self, professor_id: int) -> Sequence[Course]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[Course]:
        raise NotImplementedError

    def list_for_department(self, department_id: int) -> Sequence[Course]:
        raise NotImplementedError

from __future__ import annotations

from typing import Protocol, Sequence

from .model import GradeEntry, NewGrade


class GradeRepository(Protocol):
    def append_grades(self, *, course_id: int, grades: Sequence[NewGrade], submitted_by: int) -> int:
        """Append to the course grade list and to each student's grade history.

        Both copies are written in one transaction. Returns the number of grades appended.
        """

        raise NotImplementedError

    def list_for_course(self, course_id: int) -> Sequence[GradeEntry]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[GradeEntry]:
        raise NotImplementedError

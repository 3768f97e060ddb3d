from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Course:
    """Domain entity: a course with its lecture counter."""

    course_id: int
    code: str
    name: str
    description: Optional[str] = None
    credits: int = 3
    total_lectures: int = 0
    department_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.course_id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "credits": self.credits,
            "totalLectures": self.total_lectures,
            "departmentId": self.department_id,
        }


@dataclass(frozen=True)
class RosterStudent:
    """An enrolled student as seen from the course roster."""

    student_id: int
    full_name: str
    student_number: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.student_id, "full_name": self.full_name, "student_number": self.student_number}

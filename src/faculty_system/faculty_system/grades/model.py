from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.results import Rejected


@dataclass(frozen=True)
class NewGrade:
    student_id: int
    grade: float


@dataclass(frozen=True)
class GradeEntry:
    """One graded item, as stored on the course and in the student's history."""

    course_id: int
    student_id: int
    grade: float
    submitted_by: Optional[int] = None
    created_at: Optional[datetime] = None
    student_name: Optional[str] = None
    course_code: Optional[str] = None
    course_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "courseId": self.course_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "grade": self.grade,
            "submittedBy": self.submitted_by,
            "createdAt": self.created_at.isoformat(timespec="seconds") if self.created_at else None,
        }


@dataclass(frozen=True)
class GradeOutcome:
    submitted_count: int
    invalid: list[Rejected] = field(default_factory=list)
    missing: list[Rejected] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "submittedCount": self.submitted_count,
            "invalid": [r.to_dict() for r in self.invalid],
            "missing": [r.to_dict() for r in self.missing],
        }

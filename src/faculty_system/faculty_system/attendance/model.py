from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_date
from ..common.results import Rejected
from ..core.enums import AttendanceStatus
from .aggregate import AttendanceStats, AttendanceSummary


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one ledger fact per (course, student, date)."""

    course_id: int
    student_id: int
    attendance_date: date
    status: AttendanceStatus
    marked_by: Optional[int] = None
    student_name: Optional[str] = None
    course_code: Optional[str] = None
    course_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "courseId": self.course_id,
            "courseCode": self.course_code,
            "courseName": self.course_name,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "date": format_date(self.attendance_date),
            "status": self.status.value,
            "markedBy": self.marked_by,
        }


@dataclass(frozen=True)
class LedgerMark:
    """A validated mark, ready to be upserted."""

    student_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class MarkOutcome:
    processed_count: int
    invalid: list[Rejected]
    stats: dict[int, AttendanceStats] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "processedCount": self.processed_count,
            "invalid": [r.to_dict() for r in self.invalid],
        }


@dataclass(frozen=True)
class AttendanceView:
    """Records plus their status summary (course or student view)."""

    records: list[AttendanceRecord]
    summary: AttendanceSummary

    def to_dict(self) -> dict:
        return {"records": [r.to_dict() for r in self.records], "summary": self.summary.to_dict()}


@dataclass(frozen=True)
class ReportRow:
    student_id: int
    full_name: str
    stats: AttendanceStats
    last_date: Optional[date]

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.full_name,
            **self.stats.to_dict(),
            "lastDate": format_date(self.last_date),
        }


@dataclass(frozen=True)
class AttendanceReport:
    course_id: int
    total_lectures: int
    rows: list[ReportRow]

    def to_dict(self) -> dict:
        return {
            "courseId": self.course_id,
            "totalLectures": self.total_lectures,
            "perStudent": [r.to_dict() for r in self.rows],
        }

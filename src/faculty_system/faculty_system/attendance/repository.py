from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .aggregate import AttendanceStats
from .model import AttendanceRecord, LedgerMark


class AttendanceRepository(Protocol):
    def record_session(
        self,
        *,
        course_id: int,
        attendance_date: date,
        marks: Sequence[LedgerMark],
        marked_by: int,
    ) -> dict[int, AttendanceStats]:
        """Persist one marking session as a single unit of work.

        Bumps the course's lecture counter by one, upserts ``marks`` keyed by
        (course, student, date) and recomputes the stats of every marked
        student from the ledger. Returns the refreshed stats by student id.
        """

        raise NotImplementedError

    def list_for_course(self, course_id: int, attendance_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(
        self,
        student_id: int,
        *,
        course_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_course_stats(self, course_id: int) -> dict[int, AttendanceStats]:
        """Stats by student id for one course."""

        raise NotImplementedError

    def get_student_stats(self, student_id: int) -> dict[int, AttendanceStats]:
        """Stats by course id for one student."""

        raise NotImplementedError

    def get_last_dates(self, course_id: int) -> dict[int, date]:
        """Most recent marked date by student id for one course."""

        raise NotImplementedError

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from ..common.datetime_utils import format_date, parse_iso_date, parse_optional_date
from ..common.results import Accepted, EntryResult, Rejected, accepted_values, rejected
from ..common.validators import coerce_id, is_blank
from ..core.constants import DEFAULT_ATTENDANCE_WARNING_THRESHOLD, REASON_INVALID_STATUS, REASON_MISSING_FIELD
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..courses.access import ensure_teaches, load_course
from ..courses.model import Course
from ..courses.repository import CourseRepository
from ..courses.roster import RosterResolver, claimed_id, claimed_name
from ..notifications.service import NotificationService
from .aggregate import AttendanceStats, AttendanceSummary
from .model import AttendanceReport, AttendanceView, LedgerMark, MarkOutcome, ReportRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseStanding:
    """A student's standing in one enrolled course."""

    course: Course
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {
            "courseId": self.course.course_id,
            "courseCode": self.course.code,
            "courseName": self.course.name,
            **self.stats.to_dict(),
            "totalLectures": self.course.total_lectures,
        }


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        courses: CourseRepository,
        notifications: NotificationService | None = None,
        *,
        warning_threshold: float = DEFAULT_ATTENDANCE_WARNING_THRESHOLD,
    ):
        self._attendance = attendance
        self._courses = courses
        self._notifications = notifications
        self._warning_threshold = float(warning_threshold)

    @property
    def warning_threshold(self) -> float:
        return self._warning_threshold

    def _resolve_marks(self, course: Course, entries: Sequence[Mapping[str, Any]]) -> list[EntryResult]:
        resolver = RosterResolver(self._courses.get_roster(course.course_id))
        results: list[EntryResult] = []
        for index, entry in enumerate(entries):
            raw_status = entry.get("status") if isinstance(entry, Mapping) else None
            if is_blank(raw_status):
                results.append(
                    Rejected(index=index, reason=REASON_MISSING_FIELD, student_id=claimed_id(entry), name=claimed_name(entry))
                )
                continue

            resolved = resolver.resolve_one(index, entry)
            if not resolved.ok:
                results.append(resolved)
                continue

            status = AttendanceStatus.parse(raw_status)
            if status is None:
                results.append(
                    Rejected(index=index, reason=REASON_INVALID_STATUS, student_id=claimed_id(entry), name=claimed_name(entry))
                )
                continue

            results.append(Accepted(index=index, value=LedgerMark(student_id=resolved.value.student_id, status=status)))
        return results

    def mark_attendance(self, *, caller_id: int, course_id, attendance_date, entries) -> MarkOutcome:
        """Record one lecture session for a course.

        The lecture counter moves by exactly one per call; each entry is
        accepted or rejected on its own.
        """
        course = load_course(self._courses, course_id)
        ensure_teaches(self._courses, course, caller_id)
        session_date = parse_iso_date(attendance_date, "date")
        if not isinstance(entries, list):
            raise ValidationError("attendanceList must be an array")

        results = self._resolve_marks(course, entries)
        marks: list[LedgerMark] = accepted_values(results)
        invalid = rejected(results)

        refreshed = self._attendance.record_session(
            course_id=course.course_id,
            attendance_date=session_date,
            marks=marks,
            marked_by=int(caller_id),
        )
        logger.info(
            "Attendance for course %s on %s: processed=%d invalid=%d",
            course.course_id, format_date(session_date), len(marks), len(invalid),
        )

        self._warn_low_attendance(course, refreshed)
        return MarkOutcome(processed_count=len(marks), invalid=invalid, stats=refreshed)

    def _warn_low_attendance(self, course: Course, stats: dict[int, AttendanceStats]) -> None:
        if not self._notifications:
            return
        for student_id, s in stats.items():
            if s.total > 0 and s.percentage < self._warning_threshold:
                self._notifications.notify(
                    student_id,
                    "Attendance warning",
                    f"Your attendance in {course.code} is {s.percentage:.2f}%, "
                    f"below the required {self._warning_threshold:.0f}%.",
                )

    def get_course_attendance(self, *, course_id, attendance_date=None) -> AttendanceView:
        course = load_course(self._courses, course_id)
        on_date = parse_optional_date(attendance_date, "date")
        records = list(self._attendance.list_for_course(course.course_id, on_date))
        return AttendanceView(records=records, summary=AttendanceSummary.from_statuses(r.status for r in records))

    def get_student_attendance(self, *, student_id: int, course_id=None) -> AttendanceView:
        cid = None
        if not is_blank(course_id):
            cid = load_course(self._courses, course_id).course_id
        records = list(self._attendance.list_for_student(int(student_id), course_id=cid))
        return AttendanceView(records=records, summary=AttendanceSummary.from_statuses(r.status for r in records))

    def get_attendance_report(self, *, caller_id: int, course_id) -> AttendanceReport:
        course = load_course(self._courses, course_id)
        ensure_teaches(self._courses, course, caller_id)

        roster = self._courses.get_roster(course.course_id)
        stats = self._attendance.get_course_stats(course.course_id)
        last_dates = self._attendance.get_last_dates(course.course_id)

        rows = [
            ReportRow(
                student_id=s.student_id,
                full_name=s.full_name,
                stats=stats.get(s.student_id, AttendanceStats()),
                last_date=last_dates.get(s.student_id),
            )
            for s in roster
        ]
        return AttendanceReport(course_id=course.course_id, total_lectures=course.total_lectures, rows=rows)

    def get_attendance_overview(self, student_id: int) -> list[CourseStanding]:
        stats = self._attendance.get_student_stats(int(student_id))
        return [
            CourseStanding(course=c, stats=stats.get(c.course_id, AttendanceStats()))
            for c in self._courses.list_for_student(int(student_id))
        ]

    def get_attendance_warnings(self, student_id: int) -> list[dict]:
        # Courses without any marks yet sit at 0% and are reported too.
        return [
            {
                "courseId": s.course.course_id,
                "courseName": s.course.name,
                "percentage": round(s.stats.percentage, 2),
                "status": "At risk",
            }
            for s in self.get_attendance_overview(student_id)
            if s.stats.percentage < self._warning_threshold
        ]

    def get_attendance_in_range(self, *, student_id: int, course_id=None, start=None, end=None):
        cid = coerce_id(course_id) if not is_blank(course_id) else None
        if not is_blank(course_id) and cid is None:
            raise ValidationError("courseId is not valid")
        start_d = parse_optional_date(start, "from")
        end_d = parse_optional_date(end, "to")
        if start_d and end_d and start_d > end_d:
            raise ValidationError("'from' must not be after 'to'")
        return list(self._attendance.list_for_student(int(student_id), course_id=cid, start=start_d, end=end_d))

    def get_attendance_chart(self, *, student_id: int, course_id) -> dict:
        course = load_course(self._courses, course_id)
        records = self._attendance.list_for_student(int(student_id), course_id=course.course_id)
        return {
            "dates": [format_date(r.attendance_date) for r in records],
            "status": [1 if r.status == AttendanceStatus.PRESENT else 0 for r in records],
        }

    def build_student_export(self, *, student_id: int, course_id) -> tuple[Course, list, AttendanceStats]:
        course = load_course(self._courses, course_id)
        records = list(self._attendance.list_for_student(int(student_id), course_id=course.course_id))
        stats = self._attendance.get_student_stats(int(student_id)).get(course.course_id, AttendanceStats())
        return course, records, stats

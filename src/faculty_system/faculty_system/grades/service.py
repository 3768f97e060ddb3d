from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Any, Mapping, Optional, Sequence

from ..common.results import Rejected
from ..common.validators import coerce_id, is_blank
from ..core.constants import REASON_INVALID_GRADE, REASON_MISSING_FIELD
from ..core.exceptions import ValidationError
from ..courses.access import ensure_teaches, load_course
from ..courses.repository import CourseRepository
from ..courses.roster import RosterResolver, claimed_id, claimed_name
from ..notifications.service import NotificationService
from .model import GradeEntry, GradeOutcome, NewGrade
from .repository import GradeRepository

logger = logging.getLogger(__name__)


def parse_grade(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        grade = float(value)
    except (TypeError, ValueError):
        return None
    return grade if math.isfinite(grade) else None


class GradeService:
    def __init__(
        self,
        grades: GradeRepository,
        courses: CourseRepository,
        notifications: NotificationService | None = None,
    ):
        self._grades = grades
        self._courses = courses
        self._notifications = notifications

    def submit_grades(self, *, caller_id: int, course_id, entries) -> GradeOutcome:
        """Append a batch of grades to a course.

        Entries without ``studentId`` or ``grade`` land in ``missing``; entries
        that do not match the roster (or carry a non-numeric grade) land in
        ``invalid``. Resubmitting for a student adds another graded item.
        """
        course = load_course(self._courses, course_id)
        ensure_teaches(self._courses, course, caller_id)
        if not isinstance(entries, list) or not entries:
            raise ValidationError("grades must be a non-empty array")

        resolver = RosterResolver(self._courses.get_roster(course.course_id))
        accepted: list[NewGrade] = []
        invalid: list[Rejected] = []
        missing: list[Rejected] = []

        for index, entry in enumerate(entries):
            raw_grade = entry.get("grade") if isinstance(entry, Mapping) else None
            if claimed_id(entry) is None or is_blank(raw_grade):
                missing.append(
                    Rejected(index=index, reason=REASON_MISSING_FIELD, student_id=claimed_id(entry), name=claimed_name(entry))
                )
                continue

            resolved = resolver.resolve_one(index, entry, require_name=False)
            if not resolved.ok:
                invalid.append(resolved)
                continue

            grade = parse_grade(raw_grade)
            if grade is None:
                invalid.append(
                    Rejected(index=index, reason=REASON_INVALID_GRADE, student_id=claimed_id(entry), name=claimed_name(entry))
                )
                continue

            accepted.append(NewGrade(student_id=resolved.value.student_id, grade=grade))

        submitted = self._grades.append_grades(course_id=course.course_id, grades=accepted, submitted_by=int(caller_id))
        logger.info(
            "Grades for course %s: submitted=%d invalid=%d missing=%d",
            course.course_id, submitted, len(invalid), len(missing),
        )

        if self._notifications and accepted:
            self._notifications.notify_many(
                sorted({g.student_id for g in accepted}),
                "New grade posted",
                f"A new grade was posted for {course.code} - {course.name}.",
            )
        return GradeOutcome(submitted_count=submitted, invalid=invalid, missing=missing)

    def submit_grade(self, *, caller_id: int, course_id, student_id, grade) -> GradeEntry:
        course = load_course(self._courses, course_id)
        ensure_teaches(self._courses, course, caller_id)

        sid = coerce_id(student_id)
        value = parse_grade(grade)
        if sid is None or value is None:
            raise ValidationError("courseId, studentId and a numeric grade are required")

        if not RosterResolver(self._courses.get_roster(course.course_id)).is_enrolled(sid):
            raise ValidationError("Student not enrolled in this course")

        self._grades.append_grades(
            course_id=course.course_id,
            grades=[NewGrade(student_id=sid, grade=value)],
            submitted_by=int(caller_id),
        )
        if self._notifications:
            self._notifications.notify(sid, "New grade posted", f"A new grade was posted for {course.code} - {course.name}.")
        return GradeEntry(course_id=course.course_id, student_id=sid, grade=value, submitted_by=int(caller_id))

    def get_course_grades(self, *, caller_id: int, course_id) -> Sequence[GradeEntry]:
        course = load_course(self._courses, course_id)
        ensure_teaches(self._courses, course, caller_id)
        return self._grades.list_for_course(course.course_id)

    def get_student_grades(self, student_id: int) -> list[dict]:
        """The student's own grade entries, grouped by enrolled course."""
        by_course: dict[int, list[GradeEntry]] = defaultdict(list)
        for g in self._grades.list_for_student(int(student_id)):
            by_course[g.course_id].append(g)

        return [
            {
                "courseId": c.course_id,
                "courseCode": c.code,
                "courseName": c.name,
                "credits": c.credits,
                "grades": [g.to_dict() for g in by_course.get(c.course_id, [])],
            }
            for c in self._courses.list_for_student(int(student_id))
        ]

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_placeholders
from .aggregate import AttendanceStats
from .model import AttendanceRecord, LedgerMark
from .repository import AttendanceRepository

_RECORD_SELECT = """
    SELECT ar.course_id, ar.student_id, ar.attendance_date, ar.status, ar.marked_by,
           u.full_name AS student_name, c.code AS course_code, c.name AS course_name
    FROM attendance_records ar
    JOIN users u ON u.user_id = ar.student_id
    JOIN courses c ON c.course_id = ar.course_id
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        course_id=int(r["course_id"]),
        student_id=int(r["student_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        marked_by=int(r["marked_by"]) if r.get("marked_by") is not None else None,
        student_name=r.get("student_name"),
        course_code=r.get("course_code"),
        course_name=r.get("course_name"),
    )


def _to_stats(r: dict) -> AttendanceStats:
    return AttendanceStats(present=int(r["present"]), absent=int(r["absent"]))


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record_session(
        self,
        *,
        course_id: int,
        attendance_date: date,
        marks: Sequence[LedgerMark],
        marked_by: int,
    ) -> dict[int, AttendanceStats]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Also takes the course row lock: sessions on one course run one at a time.
            cur.execute(
                "UPDATE courses SET total_lectures = total_lectures + 1 WHERE course_id=%s",
                (int(course_id),),
            )
            if cur.rowcount == 0:
                raise NotFoundError("Course not found")

            if not marks:
                return {}

            cur.executemany(
                """
                INSERT INTO attendance_records(course_id, student_id, attendance_date, status, marked_by)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), marked_by=VALUES(marked_by)
                """,
                [(int(course_id), m.student_id, attendance_date, m.status.value, int(marked_by)) for m in marks],
            )

            student_ids = sorted({m.student_id for m in marks})
            cur.execute(
                f"""
                SELECT student_id, status
                FROM attendance_records
                WHERE course_id=%s AND student_id IN ({in_placeholders(student_ids)})
                FOR UPDATE
                """,
                (int(course_id), *student_ids),
            )
            statuses: dict[int, list[AttendanceStatus]] = defaultdict(list)
            for r in fetchall(cur):
                statuses[int(r["student_id"])].append(AttendanceStatus(r["status"]))

            refreshed = {sid: AttendanceStats.from_statuses(statuses[sid]) for sid in student_ids}

            cur.executemany(
                """
                INSERT INTO student_attendance_stats(student_id, course_id, present, absent, percentage)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    present=VALUES(present), absent=VALUES(absent), percentage=VALUES(percentage)
                """,
                [(sid, int(course_id), s.present, s.absent, s.percentage) for sid, s in refreshed.items()],
            )
            return refreshed

    def list_for_course(self, course_id: int, attendance_date: Optional[date] = None) -> Sequence[AttendanceRecord]:
        clauses = ["ar.course_id=%s"]
        params: list[object] = [int(course_id)]
        if attendance_date is not None:
            clauses.append("ar.attendance_date=%s")
            params.append(attendance_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_RECORD_SELECT} WHERE {' AND '.join(clauses)} ORDER BY ar.attendance_date ASC, u.full_name ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student(
        self,
        student_id: int,
        *,
        course_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["ar.student_id=%s"]
        params: list[object] = [int(student_id)]
        if course_id is not None:
            clauses.append("ar.course_id=%s")
            params.append(int(course_id))
        if start is not None:
            clauses.append("ar.attendance_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("ar.attendance_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_RECORD_SELECT} WHERE {' AND '.join(clauses)} ORDER BY ar.attendance_date ASC, c.code ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_course_stats(self, course_id: int) -> dict[int, AttendanceStats]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, present, absent FROM student_attendance_stats WHERE course_id=%s",
                (int(course_id),),
            )
            return {int(r["student_id"]): _to_stats(r) for r in fetchall(cur)}

    def get_student_stats(self, student_id: int) -> dict[int, AttendanceStats]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT course_id, present, absent FROM student_attendance_stats WHERE student_id=%s",
                (int(student_id),),
            )
            return {int(r["course_id"]): _to_stats(r) for r in fetchall(cur)}

    def get_last_dates(self, course_id: int) -> dict[int, date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, MAX(attendance_date) AS last_date
                FROM attendance_records
                WHERE course_id=%s
                GROUP BY student_id
                """,
                (int(course_id),),
            )
            return {int(r["student_id"]): r["last_date"] for r in fetchall(cur)}

from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import GradeEntry, NewGrade
from .repository import GradeRepository


def _to_entry(r: dict) -> GradeEntry:
    return GradeEntry(
        course_id=int(r["course_id"]),
        student_id=int(r["student_id"]),
        grade=float(r["grade"]),
        submitted_by=int(r["submitted_by"]) if r.get("submitted_by") is not None else None,
        created_at=r.get("created_at"),
        student_name=r.get("student_name"),
        course_code=r.get("course_code"),
        course_name=r.get("course_name"),
    )


class MySQLGradeRepository(GradeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append_grades(self, *, course_id: int, grades: Sequence[NewGrade], submitted_by: int) -> int:
        if not grades:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT INTO course_grades(course_id, student_id, grade, submitted_by) VALUES(%s,%s,%s,%s)",
                [(int(course_id), g.student_id, g.grade, int(submitted_by)) for g in grades],
            )
            cur.executemany(
                "INSERT INTO student_grades(student_id, course_id, grade, submitted_by) VALUES(%s,%s,%s,%s)",
                [(g.student_id, int(course_id), g.grade, int(submitted_by)) for g in grades],
            )
            return len(grades)

    def list_for_course(self, course_id: int) -> Sequence[GradeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT g.course_id, g.student_id, g.grade, g.submitted_by, g.created_at,
                       u.full_name AS student_name
                FROM course_grades g
                JOIN users u ON u.user_id = g.student_id
                WHERE g.course_id=%s
                ORDER BY g.created_at ASC, g.grade_id ASC
                """,
                (int(course_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[GradeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT g.course_id, g.student_id, g.grade, g.submitted_by, g.created_at,
                       c.code AS course_code, c.name AS course_name
                FROM student_grades g
                JOIN courses c ON c.course_id = g.course_id
                WHERE g.student_id=%s
                ORDER BY g.created_at ASC, g.entry_id ASC
                """,
                (int(student_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

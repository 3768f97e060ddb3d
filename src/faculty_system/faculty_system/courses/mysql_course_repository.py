from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_placeholders
from .model import Course, RosterStudent
from .repository import CourseRepository

_COURSE_COLUMNS = "c.course_id, c.code, c.name, c.description, c.credits, c.total_lectures, c.department_id"


def _to_course(r: dict) -> Course:
    return Course(
        course_id=int(r["course_id"]),
        code=r["code"],
        name=r["name"],
        description=r.get("description"),
        credits=int(r.get("credits") or 0),
        total_lectures=int(r.get("total_lectures") or 0),
        department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
    )


class MySQLCourseRepository(CourseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, course_id: int) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COURSE_COLUMNS} FROM courses c WHERE c.course_id=%s", (int(course_id),))
            r = fetchone(cur)
            return _to_course(r) if r else None

    def get_by_code(self, code: str) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COURSE_COLUMNS} FROM courses c WHERE c.code=%s", (code,))
            r = fetchone(cur)
            return _to_course(r) if r else None

    def create_course(
        self, *, code: str, name: str, description: Optional[str], credits: int, department_id: Optional[int] = None
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO courses(code, name, description, credits, department_id) VALUES(%s,%s,%s,%s,%s)",
                (code, name, description, int(credits), department_id),
            )
            return int(cur.lastrowid)

    def get_roster(self, course_id: int) -> Sequence[RosterStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.full_name, u.student_number
                FROM course_students cs
                JOIN users u ON u.user_id = cs.student_id
                WHERE cs.course_id=%s
                ORDER BY u.full_name ASC
                """,
                (int(course_id),),
            )
            return [
                RosterStudent(
                    student_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    student_number=r.get("student_number"),
                )
                for r in fetchall(cur)
            ]

    def get_professor_ids(self, course_id: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT professor_id FROM course_professors WHERE course_id=%s", (int(course_id),))
            return {int(r["professor_id"]) for r in fetchall(cur)}

    def add_students(self, *, course_id: int, student_ids: Sequence[int]) -> int:
        if not student_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT IGNORE INTO course_students(course_id, student_id) VALUES(%s,%s)",
                [(int(course_id), int(sid)) for sid in student_ids],
            )
            return max(int(cur.rowcount), 0)

    def remove_students(self, *, course_id: int, student_ids: Sequence[int]) -> int:
        ids = [int(sid) for sid in student_ids]
        if not ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM course_students WHERE course_id=%s AND student_id IN ({in_placeholders(ids)})",
                (int(course_id), *ids),
            )
            return max(int(cur.rowcount), 0)

    def add_professors(self, *, course_id: int, professor_ids: Sequence[int]) -> int:
        if not professor_ids:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT IGNORE INTO course_professors(course_id, professor_id) VALUES(%s,%s)",
                [(int(course_id), int(pid)) for pid in professor_ids],
            )
            return max(int(cur.rowcount), 0)

    def list_for_professor(self, professor_id: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COURSE_COLUMNS}
                FROM courses c
                JOIN course_professors cp ON cp.course_id = c.course_id
                WHERE cp.professor_id=%s
                ORDER BY c.code ASC
                """,
                (int(professor_id),),
            )
            return [_to_course(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COURSE_COLUMNS}
                FROM courses c
                JOIN course_students cs ON cs.course_id = c.course_id
                WHERE cs.student_id=%s
                ORDER BY c.code ASC
                """,
                (int(student_id),),
            )
            return [_to_course(r) for r in fetchall(cur)]

    def list_for_department(self, department_id: int) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COURSE_COLUMNS} FROM courses c WHERE c.department_id=%s ORDER BY c.code ASC",
                (int(department_id),),
            )
            return [_to_course(r) for r in fetchall(cur)]

"""In-memory repositories mirroring the MySQL implementations."""
from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from src.faculty_system.faculty_system.attendance.aggregate import AttendanceStats
from src.faculty_system.faculty_system.attendance.model import AttendanceRecord, LedgerMark
from src.faculty_system.faculty_system.core.enums import Role
from src.faculty_system.faculty_system.core.exceptions import NotFoundError, PersistenceError
from src.faculty_system.faculty_system.courses.model import Course, RosterStudent
from src.faculty_system.faculty_system.departments.model import Department
from src.faculty_system.faculty_system.grades.model import GradeEntry, NewGrade
from src.faculty_system.faculty_system.notifications.model import Notification
from src.faculty_system.faculty_system.users.model import User


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self.by_id: dict[int, User] = {u.user_id: u for u in users}
        self._next_id = max(self.by_id, default=0) + 1

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        email = (email or "").strip().lower()
        return next((u for u in self.by_id.values() if u.email == email), None)

    def get_many(self, user_ids):
        return [self.by_id[i] for i in user_ids if i in self.by_id]

    def create_user(self, *, full_name, email, password_hash, role, student_number=None) -> int:
        uid = self._next_id
        self._next_id += 1
        self.by_id[uid] = User(
            user_id=uid,
            full_name=full_name,
            email=email.lower(),
            password_hash=password_hash,
            role=role,
            student_number=student_number,
        )
        return uid

    def list_active_ids_by_role(self, role: Role):
        return sorted(u.user_id for u in self.by_id.values() if u.role == role and u.is_active)


class InMemoryCourses:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.by_id: dict[int, Course] = {}
        self.students: dict[int, set[int]] = defaultdict(set)
        self.professors: dict[int, set[int]] = defaultdict(set)
        self._next_id = 1

    def get_by_id(self, course_id: int) -> Optional[Course]:
        return self.by_id.get(int(course_id))

    def get_by_code(self, code: str) -> Optional[Course]:
        return next((c for c in self.by_id.values() if c.code == code), None)

    def create_course(self, *, code, name, description=None, credits=3, department_id=None) -> int:
        cid = self._next_id
        self._next_id += 1
        self.by_id[cid] = Course(
            course_id=cid, code=code, name=name, description=description, credits=credits, department_id=department_id
        )
        return cid

    def get_roster(self, course_id: int):
        roster = [
            RosterStudent(student_id=u.user_id, full_name=u.full_name, student_number=u.student_number)
            for u in self._users.get_many(sorted(self.students[int(course_id)]))
        ]
        return sorted(roster, key=lambda s: s.full_name)

    def get_professor_ids(self, course_id: int) -> set[int]:
        return set(self.professors[int(course_id)])

    def add_students(self, *, course_id, student_ids) -> int:
        before = len(self.students[course_id])
        self.students[course_id].update(student_ids)
        return len(self.students[course_id]) - before

    def remove_students(self, *, course_id, student_ids) -> int:
        before = len(self.students[course_id])
        self.students[course_id].difference_update(student_ids)
        return before - len(self.students[course_id])

    def add_professors(self, *, course_id, professor_ids) -> int:
        before = len(self.professors[course_id])
        self.professors[course_id].update(professor_ids)
        return len(self.professors[course_id]) - before

    def list_for_professor(self, professor_id: int):
        return sorted((c for c in self.by_id.values() if professor_id in self.professors[c.course_id]), key=lambda c: c.code)

    def list_for_student(self, student_id: int):
        return sorted((c for c in self.by_id.values() if student_id in self.students[c.course_id]), key=lambda c: c.code)

    def list_for_department(self, department_id: int):
        return sorted((c for c in self.by_id.values() if c.department_id == department_id), key=lambda c: c.code)

    def bump_lectures(self, course_id: int) -> None:
        course = self.by_id.get(int(course_id))
        if course is None:
            raise NotFoundError("Course not found")
        self.by_id[course.course_id] = replace(course, total_lectures=course.total_lectures + 1)


class InMemoryDepartments:
    def __init__(self, courses: InMemoryCourses):
        self._courses = courses
        self.by_id: dict[int, Department] = {}
        self._next_id = 1

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda d: d.name)

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self.by_id.get(int(department_id))

    def get_by_code(self, code: str) -> Optional[Department]:
        return next((d for d in self.by_id.values() if d.code == code), None)

    def create(self, *, code, name, office_location) -> int:
        did = self._next_id
        self._next_id += 1
        self.by_id[did] = Department(department_id=did, code=code, name=name, office_location=office_location)
        return did

    def update(self, *, department_id, name, office_location) -> bool:
        department = self.by_id.get(department_id)
        if department is None:
            return False
        self.by_id[department_id] = replace(department, name=name, office_location=office_location)
        return True

    def delete(self, department_id) -> bool:
        if self.by_id.pop(department_id, None) is None:
            return False
        # ON DELETE SET NULL
        for course in list(self._courses.by_id.values()):
            if course.department_id == department_id:
                self._courses.by_id[course.course_id] = replace(course, department_id=None)
        return True


class InMemoryAttendance:
    def __init__(self, courses: InMemoryCourses, users: InMemoryUsers):
        self._courses = courses
        self._users = users
        self.ledger: dict[tuple[int, int, date], AttendanceRecord] = {}
        self.stats: dict[tuple[int, int], AttendanceStats] = {}

    def record_session(self, *, course_id, attendance_date, marks: Sequence[LedgerMark], marked_by):
        self._courses.bump_lectures(course_id)
        course = self._courses.get_by_id(course_id)

        for m in marks:
            user = self._users.get_by_id(m.student_id)
            self.ledger[(course_id, m.student_id, attendance_date)] = AttendanceRecord(
                course_id=course_id,
                student_id=m.student_id,
                attendance_date=attendance_date,
                status=m.status,
                marked_by=marked_by,
                student_name=user.full_name if user else None,
                course_code=course.code,
                course_name=course.name,
            )

        refreshed = {}
        for sid in sorted({m.student_id for m in marks}):
            statuses = [r.status for (cid, s, _), r in self.ledger.items() if cid == course_id and s == sid]
            refreshed[sid] = AttendanceStats.from_statuses(statuses)
            self.stats[(sid, course_id)] = refreshed[sid]
        return refreshed

    def list_for_course(self, course_id, attendance_date=None):
        items = [
            r for r in self.ledger.values()
            if r.course_id == course_id and (attendance_date is None or r.attendance_date == attendance_date)
        ]
        return sorted(items, key=lambda r: (r.attendance_date, r.student_name or ""))

    def list_for_student(self, student_id, *, course_id=None, start=None, end=None):
        items = [
            r for r in self.ledger.values()
            if r.student_id == student_id
            and (course_id is None or r.course_id == course_id)
            and (start is None or r.attendance_date >= start)
            and (end is None or r.attendance_date <= end)
        ]
        return sorted(items, key=lambda r: (r.attendance_date, r.course_code or ""))

    def get_course_stats(self, course_id):
        return {sid: s for (sid, cid), s in self.stats.items() if cid == course_id}

    def get_student_stats(self, student_id):
        return {cid: s for (sid, cid), s in self.stats.items() if sid == student_id}

    def get_last_dates(self, course_id):
        out: dict[int, date] = {}
        for (cid, sid, d) in self.ledger:
            if cid == course_id and (sid not in out or d > out[sid]):
                out[sid] = d
        return out


class InMemoryGrades:
    def __init__(self):
        self.course_entries: list[GradeEntry] = []
        self.student_entries: list[GradeEntry] = []
        self._clock = datetime(2026, 3, 1, 9, 0, 0)

    def append_grades(self, *, course_id, grades: Sequence[NewGrade], submitted_by) -> int:
        for g in grades:
            self._clock += timedelta(seconds=1)
            entry = GradeEntry(
                course_id=course_id,
                student_id=g.student_id,
                grade=g.grade,
                submitted_by=submitted_by,
                created_at=self._clock,
            )
            self.course_entries.append(entry)
            self.student_entries.append(entry)
        return len(grades)

    def list_for_course(self, course_id):
        return [g for g in self.course_entries if g.course_id == course_id]

    def list_for_student(self, student_id):
        return [g for g in self.student_entries if g.student_id == student_id]


class InMemoryNotifications:
    def __init__(self):
        self.items: list[Notification] = []

    def create_many(self, *, user_ids, title, message) -> int:
        for uid in user_ids:
            self.items.append(
                Notification(notification_id=len(self.items) + 1, user_id=uid, title=title, message=message)
            )
        return len(user_ids)

    def list_for_user(self, user_id, *, limit):
        mine = [n for n in self.items if n.user_id == user_id]
        return list(reversed(mine))[:limit]

    def mark_seen(self, *, user_id, notification_id) -> bool:
        for i, n in enumerate(self.items):
            if n.notification_id == notification_id and n.user_id == user_id:
                self.items[i] = replace(n, seen=True)
                return True
        return False

    def for_user(self, user_id: int) -> list[Notification]:
        return [n for n in self.items if n.user_id == user_id]


class BrokenNotifications(InMemoryNotifications):
    """Notification store whose writes always fail."""

    def create_many(self, *, user_ids, title, message) -> int:
        raise PersistenceError("notifications table is unavailable")

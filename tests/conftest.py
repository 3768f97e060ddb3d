from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar

import pytest
from werkzeug.security import generate_password_hash

from src.faculty_system.faculty_system.container import Container, wire_container
from src.faculty_system.faculty_system.core.enums import Role
from src.faculty_system.faculty_system.users.model import User

from fakes import (
    BrokenNotifications,
    InMemoryAttendance,
    InMemoryCourses,
    InMemoryDepartments,
    InMemoryGrades,
    InMemoryNotifications,
    InMemoryUsers,
)

os.environ.setdefault("APP_ENV", "testing")

PASSWORD = "password123"
_PASSWORD_HASH = generate_password_hash(PASSWORD)

ADMIN_ID = 1
PROFESSOR_ID = 2
OTHER_PROFESSOR_ID = 3
ALICE_ID = 10
BOB_ID = 11
CAROL_ID = 12


def _user(user_id, full_name, email, role, student_number=None) -> User:
    return User(
        user_id=user_id,
        full_name=full_name,
        email=email,
        password_hash=_PASSWORD_HASH,
        role=role,
        student_number=student_number,
    )


@dataclass
class World:
    ADMIN_ID: ClassVar[int] = ADMIN_ID
    PROFESSOR_ID: ClassVar[int] = PROFESSOR_ID
    OTHER_PROFESSOR_ID: ClassVar[int] = OTHER_PROFESSOR_ID
    ALICE_ID: ClassVar[int] = ALICE_ID
    BOB_ID: ClassVar[int] = BOB_ID
    CAROL_ID: ClassVar[int] = CAROL_ID

    users: InMemoryUsers
    courses: InMemoryCourses
    departments: InMemoryDepartments
    attendance: InMemoryAttendance
    grades: InMemoryGrades
    notifications: InMemoryNotifications
    container: Container
    course_id: int

    def token_for(self, user_id: int) -> str:
        user = self.users.get_by_id(user_id)
        return self.container.tokens.issue_access_token(user_id=user.user_id, role=user.role)

    def auth(self, user_id: int) -> dict:
        return {"Authorization": f"Bearer {self.token_for(user_id)}"}


def build_world(notifications: InMemoryNotifications | None = None) -> World:
    """One course (CS101) taught by Sara Ahmed with Alice and Bob enrolled; Carol is not."""
    users = InMemoryUsers(
        [
            _user(ADMIN_ID, "Admin Demo", "admin@faculty.local", Role.ADMIN),
            _user(PROFESSOR_ID, "Sara Ahmed", "sara@faculty.local", Role.PROFESSOR),
            _user(OTHER_PROFESSOR_ID, "Karim Nabil", "karim@faculty.local", Role.PROFESSOR),
            _user(ALICE_ID, "Alice Smith", "alice@faculty.local", Role.STUDENT, "S2024001"),
            _user(BOB_ID, "Bob Jones", "bob@faculty.local", Role.STUDENT, "S2024002"),
            _user(CAROL_ID, "Carol White", "carol@faculty.local", Role.STUDENT, "S2024003"),
        ]
    )
    courses = InMemoryCourses(users)
    course_id = courses.create_course(code="CS101", name="Intro to Programming", description=None, credits=3)
    courses.add_students(course_id=course_id, student_ids=[ALICE_ID, BOB_ID])
    courses.add_professors(course_id=course_id, professor_ids=[PROFESSOR_ID])

    departments = InMemoryDepartments(courses)
    attendance = InMemoryAttendance(courses, users)
    grades = InMemoryGrades()
    notifications = notifications if notifications is not None else InMemoryNotifications()

    container = wire_container(
        conn=None,
        users_repo=users,
        courses_repo=courses,
        departments_repo=departments,
        attendance_repo=attendance,
        grades_repo=grades,
        notifications_repo=notifications,
        jwt_secret="test-jwt-secret-0123456789abcdef0123",
        access_minutes=15,
        warning_threshold=75.0,
    )
    return World(
        users=users,
        courses=courses,
        departments=departments,
        attendance=attendance,
        grades=grades,
        notifications=notifications,
        container=container,
        course_id=course_id,
    )


@pytest.fixture()
def world() -> World:
    return build_world()


@pytest.fixture()
def app(world):
    from src.faculty_system.faculty_system.main import create_app

    flask_app = create_app(world.container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def broken_world() -> World:
    """Same world, but every notification write fails."""
    return build_world(notifications=BrokenNotifications())

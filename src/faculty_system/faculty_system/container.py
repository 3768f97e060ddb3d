from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .auth.guard import AuthGuard
from .auth.tokens import TokenService
from .core.constants import DEFAULT_ACCESS_TOKEN_MINUTES, DEFAULT_ATTENDANCE_WARNING_THRESHOLD
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.service import DepartmentService
from .grades.mysql_grade_repository import MySQLGradeRepository
from .grades.service import GradeService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Any

    users_repo: Any
    courses_repo: Any
    departments_repo: Any
    attendance_repo: Any
    grades_repo: Any
    notifications_repo: Any

    tokens: TokenService
    guard: AuthGuard

    auth_service: AuthService
    user_service: UserService
    course_service: CourseService
    department_service: DepartmentService
    attendance_service: AttendanceService
    grade_service: GradeService
    notification_service: NotificationService


def wire_container(
    *,
    conn,
    users_repo,
    courses_repo,
    departments_repo,
    attendance_repo,
    grades_repo,
    notifications_repo,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    access_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES,
    warning_threshold: float = DEFAULT_ATTENDANCE_WARNING_THRESHOLD,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""
    tokens = TokenService(jwt_secret, algorithm=jwt_algorithm, access_minutes=access_minutes)
    notification_service = NotificationService(notifications_repo, users_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        courses_repo=courses_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        grades_repo=grades_repo,
        notifications_repo=notifications_repo,
        tokens=tokens,
        guard=AuthGuard(tokens),
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        course_service=CourseService(courses_repo, users_repo, departments_repo),
        department_service=DepartmentService(departments_repo, courses_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            courses_repo,
            notification_service,
            warning_threshold=warning_threshold,
        ),
        grade_service=GradeService(grades_repo, courses_repo, notification_service),
        notification_service=notification_service,
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_algorithm: str = "HS256",
    access_minutes: int = DEFAULT_ACCESS_TOKEN_MINUTES,
    warning_threshold: float = DEFAULT_ATTENDANCE_WARNING_THRESHOLD,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        grades_repo=MySQLGradeRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        jwt_secret=jwt_secret,
        jwt_algorithm=jwt_algorithm,
        access_minutes=access_minutes,
        warning_threshold=warning_threshold,
    )

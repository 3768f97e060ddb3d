from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used by the authorization layer."""

    ADMIN = "admin"
    PROFESSOR = "professor"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Status stored per (course, student, date) in the ledger."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"

    @classmethod
    def parse(cls, value) -> "AttendanceStatus | None":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        v = value.strip()
        for status in cls:
            if status.value.lower() == v.lower():
                return status
        return None

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account (student, professor or admin).

    Plain data object; no DB access here.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    student_number: Optional[str] = None
    is_active: bool = True

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "student_number": self.student_number,
            "is_active": self.is_active,
        }

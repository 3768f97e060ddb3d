from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    code: str
    name: str
    office_location: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.department_id,
            "code": self.code,
            "name": self.name,
            "officeLocation": self.office_location,
        }

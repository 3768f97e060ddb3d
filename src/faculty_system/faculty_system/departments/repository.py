from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, code: str, name: str, office_location: Optional[str]) -> int:
        raise NotImplementedError

    def update(self, *, department_id: int, name: str, office_location: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, department_id: int) -> bool:
        """Remove a department; its courses stay, detached."""

        raise NotImplementedError

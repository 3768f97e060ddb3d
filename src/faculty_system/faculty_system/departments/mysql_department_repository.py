from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department
from .repository import DepartmentRepository

_COLUMNS = "department_id, code, name, office_location"


def _to_department(r: dict) -> Department:
    return Department(
        department_id=int(r["department_id"]),
        code=r["code"],
        name=r["name"],
        office_location=r.get("office_location"),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments ORDER BY name")
            return [_to_department(r) for r in fetchall(cur)]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE department_id=%s", (int(department_id),))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def get_by_code(self, code: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE code=%s", (code,))
            r = fetchone(cur)
            return _to_department(r) if r else None

    def create(self, *, code: str, name: str, office_location: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO departments(code, name, office_location) VALUES(%s,%s,%s)",
                (code, name, office_location),
            )
            return int(cur.lastrowid)

    def update(self, *, department_id: int, name: str, office_location: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE departments SET name=%s, office_location=%s WHERE department_id=%s",
                (name, office_location, int(department_id)),
            )
            if cur.rowcount:
                return True
            # rowcount is 0 when nothing changed, too
            cur.execute("SELECT 1 AS found FROM departments WHERE department_id=%s", (int(department_id),))
            return fetchone(cur) is not None

    def delete(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE department_id=%s", (int(department_id),))
            return cur.rowcount > 0

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import coerce_id, is_blank, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..courses.model import Course
from ..courses.repository import CourseRepository
from .model import Department
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


class DepartmentService:
    """Department catalogue (admin-managed) and its courses."""

    def __init__(self, departments: DepartmentRepository, courses: CourseRepository):
        self._departments = departments
        self._courses = courses

    def load(self, department_id) -> Department:
        did = coerce_id(department_id)
        if did is None:
            raise ValidationError("departmentId is not valid")
        department = self._departments.get_by_id(did)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def get_department(self, department_id) -> tuple[Department, Sequence[Course]]:
        department = self.load(department_id)
        return department, self._courses.list_for_department(department.department_id)

    def create_department(self, *, code: str, name: str, office_location: Optional[str] = None) -> int:
        code = require_non_empty(code, "Code").upper()
        name = require_non_empty(name, "Name")
        if self._departments.get_by_code(code):
            raise ValidationError("Department code already exists")

        department_id = self._departments.create(
            code=code, name=name, office_location=None if is_blank(office_location) else str(office_location).strip()
        )
        logger.info("Created department %s (id=%s)", code, department_id)
        return department_id

    def update_department(self, *, department_id, name: str, office_location: Optional[str] = None) -> Department:
        department = self.load(department_id)
        name = require_non_empty(name, "Name")
        office = None if is_blank(office_location) else str(office_location).strip()
        self._departments.update(department_id=department.department_id, name=name, office_location=office)
        return Department(department_id=department.department_id, code=department.code, name=name, office_location=office)

    def delete_department(self, department_id) -> None:
        department = self.load(department_id)
        self._departments.delete(department.department_id)
        logger.info("Deleted department %s (id=%s)", department.code, department.department_id)

from __future__ import annotations

from flask import Flask

from ..common.responses import json_body, success
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    guard = container.guard
    service = container.department_service

    @app.route("/api/departments", methods=["GET"], endpoint="departments_list")
    @guard.login_required
    def list_departments():
        return success([d.to_dict() for d in service.list_departments()])

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="departments_get")
    @guard.login_required
    def get_department(department_id: int):
        department, courses = service.get_department(department_id)
        return success({**department.to_dict(), "courses": [c.to_dict() for c in courses]})

    @app.route("/api/admin/departments", methods=["POST"], endpoint="admin_create_department")
    @guard.roles_required(Role.ADMIN)
    def create_department():
        body = json_body()
        department_id = service.create_department(
            code=body.get("code", ""),
            name=body.get("name", ""),
            office_location=body.get("officeLocation"),
        )
        return success({"id": department_id}, "Department created", 201)

    @app.route("/api/admin/departments/<int:department_id>", methods=["PUT"], endpoint="admin_update_department")
    @guard.roles_required(Role.ADMIN)
    def update_department(department_id: int):
        body = json_body()
        department = service.update_department(
            department_id=department_id,
            name=body.get("name", ""),
            office_location=body.get("officeLocation"),
        )
        return success(department.to_dict(), "Department updated")

    @app.route("/api/admin/departments/<int:department_id>", methods=["DELETE"], endpoint="admin_delete_department")
    @guard.roles_required(Role.ADMIN)
    def delete_department(department_id: int):
        service.delete_department(department_id)
        return success(None, "Department deleted successfully")

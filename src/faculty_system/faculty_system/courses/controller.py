from __future__ import annotations

from flask import Flask

from ..auth.guard import current_identity
from ..common.responses import json_body, success
from ..common.validators import require_id_list
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    @app.route("/api/admin/courses", methods=["POST"], endpoint="admin_create_course")
    @guard.roles_required(Role.ADMIN)
    def create_course():
        body = json_body()
        course_id = container.course_service.create_course(
            code=body.get("code", ""),
            name=body.get("name", ""),
            description=body.get("description"),
            credits=body.get("credits", 3),
            department_id=body.get("departmentId"),
        )
        return success({"id": course_id}, "Course created", 201)

    @app.route("/api/admin/courses/<int:course_id>/students", methods=["POST"], endpoint="admin_enroll_students")
    @guard.roles_required(Role.ADMIN)
    def enroll_students(course_id: int):
        student_ids = require_id_list(json_body().get("studentIds"), "studentIds")
        added = container.course_service.enroll_students(course_id=course_id, student_ids=student_ids)
        return success({"enrolled": added}, "Students enrolled")

    @app.route(
        "/api/admin/courses/<int:course_id>/students/<int:student_id>", methods=["DELETE"], endpoint="admin_unenroll_student"
    )
    @guard.roles_required(Role.ADMIN)
    def unenroll_student(course_id: int, student_id: int):
        removed = container.course_service.unenroll_students(course_id=course_id, student_ids=[student_id])
        return success({"removed": removed}, "Student unenrolled")

    @app.route("/api/admin/courses/<int:course_id>/professors", methods=["POST"], endpoint="admin_assign_professors")
    @guard.roles_required(Role.ADMIN)
    def assign_professors(course_id: int):
        professor_ids = require_id_list(json_body().get("professorIds"), "professorIds")
        added = container.course_service.assign_professors(course_id=course_id, professor_ids=professor_ids)
        return success({"assigned": added}, "Professors assigned")

    @app.route("/api/professor/courses", methods=["GET"], endpoint="professor_courses")
    @guard.roles_required(Role.PROFESSOR)
    def my_courses():
        courses = container.course_service.list_my_courses(current_identity().user_id)
        return success([c.to_dict() for c in courses], "Courses taught fetched successfully")

    @app.route("/api/courses/<int:course_id>/students", methods=["GET"], endpoint="course_students")
    @guard.roles_required(Role.PROFESSOR)
    def course_students(course_id: int):
        roster = container.course_service.list_course_students(caller_id=current_identity().user_id, course_id=course_id)
        return success([s.to_dict() for s in roster], "Students retrieved successfully")

from __future__ import annotations

from flask import Flask

from ..auth.guard import current_identity
from ..common.responses import json_body, success
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    guard = container.guard
    service = container.grade_service

    @app.route("/api/grades/submit", methods=["POST"], endpoint="grades_submit")
    @guard.roles_required(Role.PROFESSOR)
    def submit():
        body = json_body()
        outcome = service.submit_grades(
            caller_id=current_identity().user_id,
            course_id=body.get("courseId"),
            entries=body.get("grades"),
        )
        return success(outcome.to_dict(), "Grades submitted")

    @app.route("/api/grades/submit-one", methods=["POST"], endpoint="grades_submit_one")
    @guard.roles_required(Role.PROFESSOR)
    def submit_one():
        body = json_body()
        entry = service.submit_grade(
            caller_id=current_identity().user_id,
            course_id=body.get("courseId"),
            student_id=body.get("studentId"),
            grade=body.get("grade"),
        )
        return success(entry.to_dict(), "Grade submitted successfully", 201)

    @app.route("/api/grades/me", methods=["GET"], endpoint="grades_me")
    @guard.roles_required(Role.STUDENT)
    def my_grades():
        return success(service.get_student_grades(current_identity().user_id), "Grades fetched")

    @app.route("/api/grades/course/<int:course_id>", methods=["GET"], endpoint="grades_course")
    @guard.roles_required(Role.PROFESSOR)
    def course_grades(course_id: int):
        entries = service.get_course_grades(caller_id=current_identity().user_id, course_id=course_id)
        return success([g.to_dict() for g in entries], "Course grades fetched")

from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..auth.guard import current_identity
from ..common.datetime_utils import format_date
from ..common.responses import json_body, success
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    guard = container.guard
    service = container.attendance_service

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @guard.roles_required(Role.PROFESSOR)
    def mark():
        body = json_body()
        outcome = service.mark_attendance(
            caller_id=current_identity().user_id,
            course_id=body.get("courseId"),
            attendance_date=body.get("date"),
            entries=body.get("attendanceList"),
        )
        return success(outcome.to_dict(), "Attendance marked")

    @app.route("/api/attendance/course/<int:course_id>", methods=["GET"], endpoint="attendance_course")
    @guard.roles_required(Role.PROFESSOR, Role.ADMIN)
    def course_attendance(course_id: int):
        view = service.get_course_attendance(course_id=course_id, attendance_date=request.args.get("date"))
        return success(view.to_dict(), "Course attendance fetched")

    @app.route("/api/attendance/report/<int:course_id>", methods=["GET"], endpoint="attendance_report")
    @guard.roles_required(Role.PROFESSOR)
    def report(course_id: int):
        data = service.get_attendance_report(caller_id=current_identity().user_id, course_id=course_id)
        return success(data.to_dict(), "Attendance report fetched")

    @app.route("/api/attendance/me", methods=["GET"], endpoint="attendance_me")
    @guard.roles_required(Role.STUDENT)
    def my_attendance():
        view = service.get_student_attendance(
            student_id=current_identity().user_id,
            course_id=request.args.get("courseId"),
        )
        return success(view.to_dict(), "Attendance fetched")

    @app.route("/api/attendance/me/summary", methods=["GET"], endpoint="attendance_me_summary")
    @guard.roles_required(Role.STUDENT)
    def my_summary():
        standings = service.get_attendance_overview(current_identity().user_id)
        return success([s.to_dict() for s in standings], "Attendance summary fetched")

    @app.route("/api/attendance/me/warnings", methods=["GET"], endpoint="attendance_me_warnings")
    @guard.roles_required(Role.STUDENT)
    def my_warnings():
        warnings = service.get_attendance_warnings(current_identity().user_id)
        return success(
            {"threshold": service.warning_threshold, "courses": warnings},
            "Attendance warnings fetched",
        )

    @app.route("/api/attendance/me/range", methods=["GET"], endpoint="attendance_me_range")
    @guard.roles_required(Role.STUDENT)
    def my_range():
        records = service.get_attendance_in_range(
            student_id=current_identity().user_id,
            course_id=request.args.get("courseId"),
            start=request.args.get("from"),
            end=request.args.get("to"),
        )
        return success([r.to_dict() for r in records], "Attendance fetched")

    @app.route("/api/attendance/me/chart/<int:course_id>", methods=["GET"], endpoint="attendance_me_chart")
    @guard.roles_required(Role.STUDENT)
    def my_chart(course_id: int):
        data = service.get_attendance_chart(student_id=current_identity().user_id, course_id=course_id)
        return success(data, "Chart data fetched")

    @app.route("/api/attendance/me/export/<int:course_id>.csv", methods=["GET"], endpoint="attendance_me_export")
    @guard.roles_required(Role.STUDENT)
    def my_export(course_id: int):
        student_id = current_identity().user_id
        course, records, stats = service.build_student_export(student_id=student_id, course_id=course_id)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["date", "course_code", "course_name", "status"])
        writer.writeheader()
        for r in records:
            writer.writerow(
                {
                    "date": format_date(r.attendance_date),
                    "course_code": course.code,
                    "course_name": course.name,
                    "status": r.status.value,
                }
            )
        # Trailer row with the running totals.
        writer.writerow(
            {
                "date": "TOTAL",
                "course_code": course.code,
                "course_name": f"present={stats.present} absent={stats.absent}",
                "status": f"{stats.percentage:.2f}%",
            }
        )

        filename = f"attendance_{course.code}_{student_id}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

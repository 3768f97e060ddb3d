from __future__ import annotations

from flask import Flask

from ..auth.guard import current_identity
from ..common.responses import json_body, success
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    guard = container.guard

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
        token = container.tokens.issue_access_token(user_id=s_user.user_id, role=s_user.role, email=s_user.email)
        return success(
            {
                "accessToken": token,
                "tokenType": "Bearer",
                "expiresIn": container.tokens.access_minutes * 60,
                "user": {"id": s_user.user_id, "full_name": s_user.full_name, "role": s_user.role.value},
            },
            "Logged in",
        )

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @guard.login_required
    def me():
        user = container.user_service.get_profile(current_identity().user_id)
        return success(user.to_public_dict())

    @app.route("/api/admin/users", methods=["POST"], endpoint="admin_create_user")
    @guard.roles_required(Role.ADMIN)
    def create_user():
        body = json_body()
        try:
            role = Role(str(body.get("role", "")).lower())
        except ValueError:
            raise ValidationError("role must be 'student' or 'professor'")

        user_id = container.user_service.create_account(
            full_name=body.get("full_name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
            role=role,
            student_number=body.get("student_number"),
        )
        return success({"id": user_id}, "Account created", 201)

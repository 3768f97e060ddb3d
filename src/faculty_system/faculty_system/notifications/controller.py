from __future__ import annotations

from flask import Flask, request

from ..auth.guard import current_identity
from ..common.responses import json_body, success
from ..container import Container
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    guard = container.guard
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @guard.login_required
    def my_notifications():
        limit = request.args.get("limit", type=int) or DEFAULT_NOTIFICATION_LIMIT
        items = service.list_for_user(current_identity().user_id, limit=max(1, min(limit, 200)))
        return success([n.to_dict() for n in items])

    @app.route("/api/notifications/<int:notification_id>/seen", methods=["POST"], endpoint="notifications_seen")
    @guard.login_required
    def mark_seen(notification_id: int):
        service.mark_seen(user_id=current_identity().user_id, notification_id=notification_id)
        return success(None, "Notification marked as seen")

    @app.route("/api/admin/notifications/broadcast", methods=["POST"], endpoint="admin_broadcast")
    @guard.roles_required(Role.ADMIN)
    def broadcast():
        body = json_body()
        try:
            role = Role(str(body.get("role", "")).lower())
        except ValueError:
            raise ValidationError("role must be one of: admin, professor, student")

        sent = service.broadcast(role=role, title=body.get("title", ""), message=body.get("message", ""))
        return success({"sent": sent}, "Notification sent")

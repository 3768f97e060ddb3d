from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import Role
from ..core.exceptions import NotFoundError, PersistenceError
from ..users.repository import UserRepository
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def notify(self, user_id: int, title: str, message: str) -> None:
        self.notify_many([user_id], title, message)

    def notify_many(self, user_ids: Sequence[int], title: str, message: str) -> int:
        """Fire-and-forget: a failed dispatch is logged and never reaches the caller's operation."""
        if not user_ids:
            return 0
        try:
            return self._notifications.create_many(user_ids=list(user_ids), title=title, message=message)
        except PersistenceError as e:
            logger.warning("Failed to send notification %r to %d users: %s", title, len(user_ids), e)
            return 0

    def broadcast(self, *, role: Role, title: str, message: str) -> int:
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        user_ids = self._users.list_active_ids_by_role(role)
        sent = self._notifications.create_many(user_ids=list(user_ids), title=title, message=message)
        logger.info("Broadcast %r to %d %s accounts", title, sent, role.value)
        return sent

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(int(user_id), limit=int(limit))

    def mark_seen(self, *, user_id: int, notification_id: int) -> None:
        if not self._notifications.mark_seen(user_id=int(user_id), notification_id=int(notification_id)):
            raise NotFoundError("Notification not found")

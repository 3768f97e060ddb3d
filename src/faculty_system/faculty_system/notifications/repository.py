from __future__ import annotations

from typing import Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create_many(self, *, user_ids: Sequence[int], title: str, message: str) -> int:
        """Insert one notification per user. Returns the number inserted."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_seen(self, *, user_id: int, notification_id: int) -> bool:
        raise NotImplementedError

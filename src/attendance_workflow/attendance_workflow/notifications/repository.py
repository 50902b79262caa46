from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        notification_type: NotificationType,
        message: str,
        created_at: datetime,
        attendance_id: Optional[str] = None,
        reason_id: Optional[str] = None,
    ) -> Notification:
        raise NotImplementedError

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        raise NotImplementedError

    def mark_read(self, *, notification_id: str, read_at: datetime) -> bool:
        """Flip an unread notification to read. False when it was already read."""

        raise NotImplementedError

    def mark_all_read(self, *, user_id: str, read_at: datetime) -> int:
        raise NotImplementedError

    def list_for_user(self, *, user_id: str, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def count_unread(self, *, user_id: str) -> int:
        raise NotImplementedError

    def delete(self, *, notification_id: str) -> bool:
        raise NotImplementedError

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import now_utc
from ..common.validators import require_enum, require_max_length, require_non_empty
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT, MAX_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.repository import DirectoryRepository
from .model import Notification
from .repository import NotificationRepository

logger = get_logger("notifications")


class NotificationService:
    """Notification Dispatcher: durable per-user entries, pulled by clients (no push)."""

    def __init__(self, notifications: NotificationRepository, directory: DirectoryRepository):
        self._notifications = notifications
        self._directory = directory

    def notify(
        self,
        *,
        recipient_id: str,
        notification_type: NotificationType | str,
        message: str,
        attendance_id: Optional[str] = None,
        reason_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Notification:
        ntype = require_enum(notification_type, NotificationType, "notification type")
        message = require_max_length(require_non_empty(message, "message"), "message", 500)

        if not self._directory.get_user(recipient_id):
            raise NotFoundError("Recipient not found")

        notification = self._notifications.create(
            user_id=recipient_id,
            notification_type=ntype,
            message=message,
            created_at=now or now_utc(),
            attendance_id=attendance_id,
            reason_id=reason_id,
        )
        logger.info("Notification %s (%s) created for user=%s", notification.notification_id, ntype.value, recipient_id)
        return notification

    def notify_many(
        self,
        *,
        recipient_ids: Iterable[Optional[str]],
        notification_type: NotificationType,
        message: str,
        attendance_id: Optional[str] = None,
        reason_id: Optional[str] = None,
    ) -> list[Notification]:
        """Notify each distinct, non-empty recipient once."""

        created: list[Notification] = []
        seen: set[str] = set()
        for rid in recipient_ids:
            if not rid or rid in seen:
                continue
            seen.add(rid)
            created.append(
                self.notify(
                    recipient_id=rid,
                    notification_type=notification_type,
                    message=message,
                    attendance_id=attendance_id,
                    reason_id=reason_id,
                )
            )
        return created

    def _get_owned(self, *, user_id: str, notification_id: str) -> Notification:
        notification = self._notifications.get_by_id(notification_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise AuthorizationError("Not the recipient of this notification")
        return notification

    def mark_read(self, *, user_id: str, notification_id: str, now: Optional[datetime] = None) -> Notification:
        notification = self._get_owned(user_id=user_id, notification_id=notification_id)
        if notification.is_read:
            return notification

        self._notifications.mark_read(notification_id=notification_id, read_at=now or now_utc())
        return self._notifications.get_by_id(notification_id) or notification

    def mark_all_read(self, *, user_id: str, now: Optional[datetime] = None) -> int:
        return self._notifications.mark_all_read(user_id=user_id, read_at=now or now_utc())

    def list_unread(self, *, user_id: str, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id=user_id, unread_only=True, limit=self._clamp(limit))

    def list_all(self, *, user_id: str, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id=user_id, unread_only=False, limit=self._clamp(limit))

    def unread_count(self, *, user_id: str) -> int:
        return self._notifications.count_unread(user_id=user_id)

    def delete(self, *, user_id: str, notification_id: str) -> None:
        self._get_owned(user_id=user_id, notification_id=notification_id)
        if not self._notifications.delete(notification_id=notification_id):
            raise NotFoundError("Notification not found")

    @staticmethod
    def _clamp(limit: int) -> int:
        return max(1, min(int(limit), MAX_NOTIFICATION_LIMIT))

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, new_id, normalize_bool, normalize_datetime
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "id, user_id, attendance_id, reason_id, notification_type, message, is_read, read_at, created_at"


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=r["id"],
        user_id=r["user_id"],
        notification_type=NotificationType(r["notification_type"]),
        message=r["message"],
        is_read=normalize_bool(r["is_read"]),
        created_at=normalize_datetime(r["created_at"]),
        attendance_id=r.get("attendance_id"),
        reason_id=r.get("reason_id"),
        read_at=normalize_datetime(r.get("read_at")),
    )


class SqlNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        notification_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_notifications(
                    id, user_id, attendance_id, reason_id, notification_type, message, is_read, created_at
                )
                VALUES(?,?,?,?,?,?,?,?)
                """,
                (notification_id, user_id, attendance_id, reason_id, notification_type.value, message, False, created_at),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_notifications WHERE id=?", (notification_id,))
            return _to_notification(fetchone(cur))

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_notifications WHERE id=?", (notification_id,))
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def mark_read(self, *, notification_id: str, read_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_notifications SET is_read=?, read_at=? WHERE id=? AND is_read=?",
                (True, read_at, notification_id, False),
            )
            return cur.rowcount > 0

    def mark_all_read(self, *, user_id: str, read_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_notifications SET is_read=?, read_at=? WHERE user_id=? AND is_read=?",
                (True, read_at, user_id, False),
            )
            return cur.rowcount

    def list_for_user(self, *, user_id: str, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        clauses = ["user_id=?"]
        params: list[object] = [user_id]
        if unread_only:
            clauses.append("is_read=?")
            params.append(False)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_notifications
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT ?
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def count_unread(self, *, user_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS unread_count FROM attendance_notifications WHERE user_id=? AND is_read=?",
                (user_id, False),
            )
            r = fetchone(cur)
            return int(r["unread_count"]) if r else 0

    def delete(self, *, notification_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_notifications WHERE id=?", (notification_id,))
            return cur.rowcount > 0

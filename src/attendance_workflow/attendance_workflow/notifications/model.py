from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.serialization import to_dict
from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """A durable, pollable message for one recipient. ``is_read`` only goes False -> True."""

    notification_id: str
    user_id: str
    notification_type: NotificationType
    message: str
    is_read: bool
    created_at: datetime
    attendance_id: Optional[str] = None
    reason_id: Optional[str] = None
    read_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return to_dict(self, rename={"notification_id": "id"})

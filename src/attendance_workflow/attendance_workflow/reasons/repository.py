from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ReasonStatus, ReasonType
from .model import AttendanceReason, ReasonView


class ReasonRepository(Protocol):
    def create(
        self,
        *,
        attendance_id: str,
        student_id: str,
        reason_type: ReasonType,
        reason_text: str,
        submitted_at: datetime,
    ) -> AttendanceReason:
        """Insert a PENDING reason; ConflictError if the event already has one."""

        raise NotImplementedError

    def get_by_id(self, reason_id: str) -> Optional[AttendanceReason]:
        raise NotImplementedError

    def get_for_attendance(self, attendance_id: str) -> Optional[AttendanceReason]:
        raise NotImplementedError

    def get_view(self, reason_id: str) -> Optional[ReasonView]:
        raise NotImplementedError

    def list_views(
        self,
        *,
        status: Optional[ReasonStatus] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[ReasonView]:
        """Newest submission first."""

        raise NotImplementedError

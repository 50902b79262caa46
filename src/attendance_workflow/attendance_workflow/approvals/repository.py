from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceApproval


class ApprovalRepository(Protocol):
    def record_decision(
        self,
        *,
        reason_id: str,
        attendance_id: str,
        instructor_id: str,
        approved: bool,
        approval_notes: Optional[str],
        reviewed_at: datetime,
    ) -> AttendanceApproval:
        """Move the reason out of PENDING and insert the approval row in one transaction.

        Raises ConflictError when the reason is no longer pending.
        """

        raise NotImplementedError

    def list_for_reason(self, reason_id: str) -> Sequence[AttendanceApproval]:
        raise NotImplementedError

    def list_by_reviewer(self, instructor_id: str) -> Sequence[AttendanceApproval]:
        raise NotImplementedError

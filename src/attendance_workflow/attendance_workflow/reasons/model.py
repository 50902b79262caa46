from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..common.serialization import to_dict
from ..core.enums import AttendanceStatus, ReasonStatus, ReasonType


@dataclass(frozen=True)
class AttendanceReason:
    """A student's contestation of one attendance event."""

    reason_id: str
    attendance_id: str
    student_id: str
    reason_type: ReasonType
    reason_text: str
    status: ReasonStatus
    submitted_at: datetime

    def to_dict(self) -> dict:
        return to_dict(self, rename={"reason_id": "id"})


@dataclass(frozen=True)
class ReasonView:
    """Read-model: reason joined with the student name and the contested event."""

    reason: AttendanceReason
    student_name: str
    date: date
    attendance_status: AttendanceStatus

    def to_dict(self) -> dict:
        out = self.reason.to_dict()
        out.update(
            {
                "student_name": self.student_name,
                "date": self.date.isoformat(),
                "attendance_status": self.attendance_status.value,
            }
        )
        return out

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.serialization import to_dict
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one attendance outcome per (student, class, date)."""

    attendance_id: str
    student_id: str
    class_id: str
    date: date
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return to_dict(self, rename={"attendance_id": "id"})


@dataclass(frozen=True)
class ArrivalClassification:
    """Result of late-arrival detection.

    ``is_late`` is None when no schedule exists for the class on that weekday
    (indeterminate): callers must not read that as on-time.
    """

    arrival: datetime
    is_late: Optional[bool]
    schedule_start: Optional[time] = None
    threshold_minutes: Optional[int] = None
    late_boundary: Optional[datetime] = None
    margin_minutes: Optional[int] = None
    reason: Optional[str] = None

    @property
    def indeterminate(self) -> bool:
        return self.is_late is None

    def to_dict(self) -> dict:
        out = to_dict(self)
        out["indeterminate"] = self.indeterminate
        return out


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model for per-(student, class) totals."""

    student_id: str
    class_id: str
    total_sessions: int
    present_count: int
    absent_count: int
    late_count: int

    @property
    def attendance_rate(self) -> float:
        if not self.total_sessions:
            return 0.0
        return round(100.0 * self.present_count / self.total_sessions, 2)

    def to_dict(self) -> dict:
        out = to_dict(self)
        out["attendance_rate"] = self.attendance_rate
        return out


@dataclass(frozen=True)
class ClassReportRow:
    """Read-model for the class report (event joined with the student)."""

    attendance_id: str
    student_id: str
    student_name: str
    student_number: str
    status: AttendanceStatus
    date: date
    time_in: Optional[datetime]
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return to_dict(self, rename={"attendance_id": "id"})

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEvent, AttendanceSummary, ClassReportRow


class AttendanceRepository(Protocol):
    def create(
        self,
        *,
        student_id: str,
        class_id: str,
        work_date: date,
        time_in: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceEvent:
        """Insert one event; raises ConflictError if (student, class, date) exists."""

        raise NotImplementedError

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def update_fields(self, *, attendance_id: str, fields: Mapping[str, Any]) -> bool:
        """Partial update of status / notes / time_out."""

        raise NotImplementedError

    def list_events(
        self,
        *,
        student_id: Optional[str] = None,
        class_id: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def get_summary(self, *, student_id: str, class_id: Optional[str] = None) -> Sequence[AttendanceSummary]:
        raise NotImplementedError

    def get_class_report(self, *, class_id: str, work_date: Optional[date] = None) -> Sequence[ClassReportRow]:
        raise NotImplementedError

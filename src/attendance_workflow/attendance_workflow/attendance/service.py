from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_enum
from ..core.enums import AttendanceStatus, NotificationType
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..users.repository import DirectoryRepository
from .detector import LateArrivalDetector
from .model import ArrivalClassification, AttendanceEvent, AttendanceSummary, ClassReportRow
from .repository import AttendanceRepository

logger = get_logger("attendance")

_UNSET: Any = object()


class AttendanceService:
    """Attendance Recorder plus the scan flow that chains recording, detection and notification."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        directory: DirectoryRepository,
        detector: LateArrivalDetector,
        notifications: Optional[NotificationService] = None,
    ):
        self._attendance = attendance
        self._directory = directory
        self._detector = detector
        self._notifications = notifications

    def mark(
        self,
        *,
        student_id: str,
        class_id: str,
        work_date: date,
        status: Optional[AttendanceStatus | str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        """Record one event; a second mark for the same (student, class, date) is a Conflict."""

        status_v = AttendanceStatus.PRESENT if status is None else require_enum(status, AttendanceStatus, "status")
        notes = optional_text(notes)

        if not self._directory.get_student(student_id):
            raise NotFoundError("Student not found")
        if not self._directory.get_class(class_id):
            raise NotFoundError("Class not found")

        try:
            event = self._attendance.create(
                student_id=student_id,
                class_id=class_id,
                work_date=work_date,
                time_in=now or now_utc(),
                status=status_v,
                notes=notes,
            )
        except ConflictError:
            logger.warning("Duplicate attendance for student=%s class=%s date=%s", student_id, class_id, work_date)
            raise ConflictError("Student already scanned")

        logger.info("Attendance %s marked %s (student=%s class=%s)", event.attendance_id, status_v.value, student_id, class_id)
        return event

    def update(
        self,
        *,
        attendance_id: str,
        status: Any = _UNSET,
        notes: Any = _UNSET,
        time_out: Any = _UNSET,
    ) -> AttendanceEvent:
        """Partial update: only the fields passed are written."""

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        fields: dict[str, Any] = {}
        if status is not _UNSET:
            if status is None:
                raise ValidationError("status cannot be null")
            fields["status"] = require_enum(status, AttendanceStatus, "status")
        if notes is not _UNSET:
            fields["notes"] = optional_text(notes)
        if time_out is not _UNSET:
            if time_out is not None and record.time_in and time_out < record.time_in:
                raise ValidationError("time_out cannot be before time_in")
            fields["time_out"] = time_out

        if fields and not self._attendance.update_fields(attendance_id=attendance_id, fields=fields):
            raise NotFoundError("Attendance record not found")

        return self._attendance.get_by_id(attendance_id) or record

    def get(self, attendance_id: str) -> AttendanceEvent:
        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def list_events(
        self,
        *,
        student_id: Optional[str] = None,
        class_id: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> Sequence[AttendanceEvent]:
        return self._attendance.list_events(student_id=student_id, class_id=class_id, work_date=work_date)

    def summary(self, *, student_id: str, class_id: Optional[str] = None) -> Sequence[AttendanceSummary]:
        return self._attendance.get_summary(student_id=student_id, class_id=class_id)

    def class_report(self, *, class_id: str, work_date: Optional[date] = None) -> Sequence[ClassReportRow]:
        return self._attendance.get_class_report(class_id=class_id, work_date=work_date)

    def classify(self, *, student_id: str, class_id: str, arrival: datetime) -> ArrivalClassification:
        return self._detector.classify(student_id=student_id, class_id=class_id, arrival=arrival)

    def scan(
        self,
        *,
        student_id: str,
        class_id: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> tuple[AttendanceEvent, ArrivalClassification]:
        now = now or now_utc()
        classification = self.classify(student_id=student_id, class_id=class_id, arrival=now)
        local_date = now.astimezone(self._detector.zone).date()

        status = AttendanceStatus.LATE if classification.is_late else AttendanceStatus.PRESENT
        event = self.mark(
            student_id=student_id,
            class_id=class_id,
            work_date=local_date,
            status=status,
            notes=notes,
            now=now,
        )

        if classification.is_late:
            self._notify_late(event, classification)
        return event, classification

    def _notify_late(self, event: AttendanceEvent, classification: ArrivalClassification) -> None:
        if not self._notifications:
            return

        student = self._directory.get_student(event.student_id)
        klass = self._directory.get_class(event.class_id)
        name = student.name if student else "Student"
        class_name = klass.name if klass else "class"
        message = f"{name} arrived late to {class_name} ({classification.margin_minutes} min after start)"

        # The event is already recorded; a failed notification is logged, the scan still succeeds
        try:
            self._notifications.notify_many(
                recipient_ids=[student.user_id if student else None, klass.instructor_id if klass else None],
                notification_type=NotificationType.LATE_ARRIVAL,
                message=message,
                attendance_id=event.attendance_id,
            )
        except DomainError:
            logger.exception("Attendance %s recorded late but notifying failed", event.attendance_id)

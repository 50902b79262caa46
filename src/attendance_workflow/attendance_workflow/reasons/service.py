from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.app_logger import get_logger
from ..common.datetime_utils import now_utc
from ..common.validators import require_enum, require_max_length, require_non_empty
from ..core.constants import MAX_REASON_TEXT_LENGTH
from ..core.enums import REVIEWER_ROLES, NotificationType, ReasonStatus, ReasonType, Role
from ..core.exceptions import AuthorizationError, ConflictError, DomainError, NotFoundError
from ..notifications.service import NotificationService
from ..users.repository import DirectoryRepository
from .model import AttendanceReason, ReasonView
from .repository import ReasonRepository

logger = get_logger("reasons")


class ReasonService:
    """Reason Submission: one PENDING contestation per attendance event, filed by its own student."""

    def __init__(
        self,
        reasons: ReasonRepository,
        attendance: AttendanceRepository,
        directory: DirectoryRepository,
        notifications: Optional[NotificationService] = None,
    ):
        self._reasons = reasons
        self._attendance = attendance
        self._directory = directory
        self._notifications = notifications

    def submit(
        self,
        *,
        user_id: str,
        current_role: Role,
        attendance_id: str,
        reason_type: ReasonType | str,
        reason_text: str,
        now: Optional[datetime] = None,
    ) -> AttendanceReason:
        rtype = require_enum(reason_type, ReasonType, "reason_type")
        text = require_max_length(
            require_non_empty(reason_text, "reason_text"), "reason_text", MAX_REASON_TEXT_LENGTH
        )

        event = self._attendance.get_by_id(attendance_id)
        if not event:
            raise NotFoundError("Attendance record not found")

        student = self._directory.get_student(event.student_id)
        if current_role != Role.STUDENT or not student or student.user_id != user_id:
            raise AuthorizationError("Only the student of this attendance record may submit a reason")

        if self._reasons.get_for_attendance(attendance_id):
            raise ConflictError("A reason was already submitted for this attendance record")

        try:
            reason = self._reasons.create(
                attendance_id=attendance_id,
                student_id=event.student_id,
                reason_type=rtype,
                reason_text=text,
                submitted_at=now or now_utc(),
            )
        except ConflictError:
            raise ConflictError("A reason was already submitted for this attendance record")

        logger.info("Reason %s submitted for attendance=%s by student=%s", reason.reason_id, attendance_id, student.student_id)
        self._notify_reviewers(reason, event.class_id, student.name)
        return reason

    def _notify_reviewers(self, reason: AttendanceReason, class_id: str, student_name: str) -> None:
        if not self._notifications:
            return

        klass = self._directory.get_class(class_id)
        if klass and klass.instructor_id:
            recipients = [klass.instructor_id]
        else:
            recipients = [u.user_id for u in self._directory.list_users_by_role(Role.ADMIN)]

        # The reason is already committed; a failed notification is logged, not reported to the student
        try:
            self._notifications.notify_many(
                recipient_ids=recipients,
                notification_type=NotificationType.REASON_SUBMITTED,
                message=f"{student_name} submitted a {reason.reason_type.value.replace('_', ' ')} reason",
                attendance_id=reason.attendance_id,
                reason_id=reason.reason_id,
            )
        except DomainError:
            logger.exception("Reason %s submitted but notifying reviewers failed", reason.reason_id)

    def list_pending(self, *, current_role: Role) -> Sequence[ReasonView]:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only reviewers can list pending reasons")
        return self._reasons.list_views(status=ReasonStatus.PENDING)

    def list_for_student(self, *, user_id: str, current_role: Role, student_id: str) -> Sequence[ReasonView]:
        self._check_can_view(user_id=user_id, current_role=current_role, student_id=student_id)
        return self._reasons.list_views(student_id=student_id)

    def get(self, *, user_id: str, current_role: Role, reason_id: str) -> ReasonView:
        view = self._reasons.get_view(reason_id)
        if not view:
            raise NotFoundError("Reason not found")
        self._check_can_view(user_id=user_id, current_role=current_role, student_id=view.reason.student_id)
        return view

    def _check_can_view(self, *, user_id: str, current_role: Role, student_id: str) -> None:
        if current_role in REVIEWER_ROLES:
            return
        student = self._directory.get_student(student_id)
        if current_role == Role.STUDENT and student and student.user_id == user_id:
            return
        raise AuthorizationError("Access denied")

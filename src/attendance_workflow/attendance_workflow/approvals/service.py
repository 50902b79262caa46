from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import now_utc
from ..common.validators import optional_text
from ..core.enums import REVIEWER_ROLES, NotificationType, Role
from ..core.exceptions import AuthorizationError, ConflictError, DomainError, NotFoundError
from ..notifications.service import NotificationService
from ..reasons.model import AttendanceReason
from ..reasons.repository import ReasonRepository
from ..users.repository import DirectoryRepository
from .model import AttendanceApproval
from .repository import ApprovalRepository

logger = get_logger("approvals")


class ApprovalService:
    """Approval Reviewer: PENDING -> APPROVED | REJECTED, decided exactly once."""

    def __init__(
        self,
        approvals: ApprovalRepository,
        reasons: ReasonRepository,
        directory: DirectoryRepository,
        notifications: Optional[NotificationService] = None,
    ):
        self._approvals = approvals
        self._reasons = reasons
        self._directory = directory
        self._notifications = notifications

    def review(
        self,
        *,
        reviewer_id: str,
        current_role: Role,
        reason_id: str,
        approved: bool,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceApproval:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only instructors or admins can review reasons")

        reason = self._reasons.get_by_id(reason_id)
        if not reason:
            raise NotFoundError("Reason not found")
        if reason.status.is_terminal:
            raise ConflictError("Reason already reviewed")

        approval = self._approvals.record_decision(
            reason_id=reason_id,
            attendance_id=reason.attendance_id,
            instructor_id=reviewer_id,
            approved=bool(approved),
            approval_notes=optional_text(notes),
            reviewed_at=now or now_utc(),
        )
        logger.info(
            "Reason %s %s by reviewer=%s", reason_id, "approved" if approval.approved else "rejected", reviewer_id
        )

        self._notify_student(reason, approval)
        return approval

    def _notify_student(self, reason: AttendanceReason, approval: AttendanceApproval) -> None:
        """Runs after the decision is committed: a failure here is logged, the decision stands."""

        if not self._notifications:
            return

        student = self._directory.get_student(reason.student_id)
        if not student or not student.user_id:
            return

        outcome = "approved" if approval.approved else "rejected"
        try:
            self._notifications.notify(
                recipient_id=student.user_id,
                notification_type=(
                    NotificationType.REASON_APPROVED if approval.approved else NotificationType.REASON_REJECTED
                ),
                message=f"Your {reason.reason_type.value.replace('_', ' ')} reason was {outcome}",
                attendance_id=reason.attendance_id,
                reason_id=reason.reason_id,
            )
        except DomainError:
            logger.exception("Reason %s was %s but notifying user=%s failed", reason.reason_id, outcome, student.user_id)

    def list_for_reason(self, *, current_role: Role, reason_id: str) -> Sequence[AttendanceApproval]:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Access denied")
        if not self._reasons.get_by_id(reason_id):
            raise NotFoundError("Reason not found")
        return self._approvals.list_for_reason(reason_id)

    def list_by_reviewer(self, *, current_role: Role, instructor_id: str) -> Sequence[AttendanceApproval]:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Access denied")
        return self._approvals.list_by_reviewer(instructor_id)

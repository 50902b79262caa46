from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization checks."""

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STAFF = "staff"
    STUDENT = "student"


REVIEWER_ROLES = frozenset({Role.ADMIN, Role.INSTRUCTOR})


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class ReasonType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    ABSENCE = "absence"
    MEDICAL = "medical"
    OTHER = "other"


class ReasonStatus(str, Enum):
    """Reason review states: PENDING -> APPROVED | REJECTED, no way back."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ReasonStatus.PENDING


class NotificationType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    REASON_SUBMITTED = "reason_submitted"
    REASON_APPROVED = "reason_approved"
    REASON_REJECTED = "reason_rejected"

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo

from .approvals.service import ApprovalService
from .approvals.sql_approval_repository import SqlApprovalRepository
from .attendance.detector import LateArrivalDetector
from .attendance.factory import ArrivalStrategyFactory
from .attendance.service import AttendanceService
from .attendance.sql_attendance_repository import SqlAttendanceRepository
from .common.datetime_utils import get_zone
from .database.connection import DatabaseConnection, build_connection
from .notifications.service import NotificationService
from .notifications.sql_notification_repository import SqlNotificationRepository
from .reasons.service import ReasonService
from .reasons.sql_reason_repository import SqlReasonRepository
from .schedules.service import ScheduleService
from .schedules.sql_schedule_repository import SqlScheduleRepository
from .users.sql_directory_repository import SqlDirectoryRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    zone: tzinfo

    directory_repo: SqlDirectoryRepository
    schedules_repo: SqlScheduleRepository
    attendance_repo: SqlAttendanceRepository
    reasons_repo: SqlReasonRepository
    approvals_repo: SqlApprovalRepository
    notifications_repo: SqlNotificationRepository

    notification_service: NotificationService
    schedule_service: ScheduleService
    attendance_service: AttendanceService
    reason_service: ReasonService
    approval_service: ApprovalService


def build_container(*, backend: str, db_config: dict, timezone: str = "UTC") -> Container:
    conn = build_connection(backend, db_config)
    zone = get_zone(timezone)

    directory_repo = SqlDirectoryRepository(conn)
    schedules_repo = SqlScheduleRepository(conn)
    attendance_repo = SqlAttendanceRepository(conn)
    reasons_repo = SqlReasonRepository(conn)
    approvals_repo = SqlApprovalRepository(conn)
    notifications_repo = SqlNotificationRepository(conn)

    notification_service = NotificationService(notifications_repo, directory_repo)
    schedule_service = ScheduleService(schedules_repo, directory_repo)
    detector = LateArrivalDetector(schedules_repo, zone=zone, strategy_factory=ArrivalStrategyFactory())
    attendance_service = AttendanceService(attendance_repo, directory_repo, detector, notification_service)
    reason_service = ReasonService(reasons_repo, attendance_repo, directory_repo, notification_service)
    approval_service = ApprovalService(approvals_repo, reasons_repo, directory_repo, notification_service)

    return Container(
        conn=conn,
        zone=zone,
        directory_repo=directory_repo,
        schedules_repo=schedules_repo,
        attendance_repo=attendance_repo,
        reasons_repo=reasons_repo,
        approvals_repo=approvals_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        schedule_service=schedule_service,
        attendance_service=attendance_service,
        reason_service=reason_service,
        approval_service=approval_service,
    )

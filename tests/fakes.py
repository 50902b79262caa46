"""In-memory stand-ins for the repository Protocols used by the service tests."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace

from src.attendance_workflow.attendance_workflow.approvals.model import AttendanceApproval
from src.attendance_workflow.attendance_workflow.attendance.model import AttendanceEvent
from src.attendance_workflow.attendance_workflow.core.enums import ReasonStatus, Role
from src.attendance_workflow.attendance_workflow.core.exceptions import ConflictError, StorageError
from src.attendance_workflow.attendance_workflow.notifications.model import Notification
from src.attendance_workflow.attendance_workflow.reasons.model import AttendanceReason, ReasonView
from src.attendance_workflow.attendance_workflow.schedules.model import ScheduleEntry
from src.attendance_workflow.attendance_workflow.users.model import ClassInfo, Student, User

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


@dataclass
class InMemoryDirectory:
    users: dict[str, User] = field(default_factory=dict)
    students: dict[str, Student] = field(default_factory=dict)
    classes: dict[str, ClassInfo] = field(default_factory=dict)

    def get_user(self, user_id):
        return self.users.get(user_id)

    def list_users_by_role(self, role):
        return [u for u in self.users.values() if u.role == role and u.is_active]

    def get_student(self, student_id):
        return self.students.get(student_id)

    def get_class(self, class_id):
        return self.classes.get(class_id)

    def create_user(self, *, username, full_name, role):
        uid = _next_id("user")
        self.users[uid] = User(user_id=uid, username=username, full_name=full_name, role=role)
        return uid

    def create_student(self, *, name, student_number, user_id=None):
        sid = _next_id("student")
        self.students[sid] = Student(student_id=sid, name=name, student_number=student_number, user_id=user_id)
        return sid

    def create_class(self, *, name, code, instructor_id=None):
        cid = _next_id("class")
        self.classes[cid] = ClassInfo(class_id=cid, name=name, code=code, instructor_id=instructor_id)
        return cid


@dataclass
class InMemorySchedules:
    entries: dict[tuple[str, int], ScheduleEntry] = field(default_factory=dict)

    def add(self, *, class_id: str, day_of_week: int, start_time, end_time, late_threshold_minutes: int = 15):
        entry = ScheduleEntry(
            schedule_id=_next_id("schedule"),
            class_id=class_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            late_threshold_minutes=late_threshold_minutes,
        )
        self.entries[(class_id, day_of_week)] = entry
        return entry

    def get_for_class_and_day(self, *, class_id, day_of_week):
        return self.entries.get((class_id, day_of_week))

    def get_by_id(self, schedule_id):
        return next((e for e in self.entries.values() if e.schedule_id == schedule_id), None)

    def upsert(self, *, class_id, day_of_week, start_time, end_time, late_threshold_minutes):
        existing = self.entries.get((class_id, day_of_week))
        entry = self.add(
            class_id=class_id,
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            late_threshold_minutes=late_threshold_minutes,
        )
        if existing:
            entry = replace(entry, schedule_id=existing.schedule_id)
            self.entries[(class_id, day_of_week)] = entry
        return entry.schedule_id

    def delete(self, *, schedule_id):
        for key, e in list(self.entries.items()):
            if e.schedule_id == schedule_id:
                del self.entries[key]
                return True
        return False

    def list_for_class(self, *, class_id):
        return sorted((e for e in self.entries.values() if e.class_id == class_id), key=lambda e: e.day_of_week)


class InMemoryAttendance:
    def __init__(self):
        self.events: dict[str, AttendanceEvent] = {}

    def create(self, *, student_id, class_id, work_date, time_in, status, notes=None):
        if any(
            (e.student_id, e.class_id, e.date) == (student_id, class_id, work_date) for e in self.events.values()
        ):
            raise ConflictError("Record conflicts with an existing record")
        aid = _next_id("attendance")
        self.events[aid] = AttendanceEvent(
            attendance_id=aid,
            student_id=student_id,
            class_id=class_id,
            date=work_date,
            time_in=time_in,
            time_out=None,
            status=status,
            notes=notes,
        )
        return self.events[aid]

    def get_by_id(self, attendance_id):
        return self.events.get(attendance_id)

    def update_fields(self, *, attendance_id, fields):
        if attendance_id not in self.events:
            return False
        self.events[attendance_id] = replace(self.events[attendance_id], **fields)
        return True

    def list_events(self, *, student_id=None, class_id=None, work_date=None):
        return [
            e
            for e in self.events.values()
            if (student_id is None or e.student_id == student_id)
            and (class_id is None or e.class_id == class_id)
            and (work_date is None or e.date == work_date)
        ]

    def get_summary(self, *, student_id, class_id=None):
        return []

    def get_class_report(self, *, class_id, work_date=None):
        return []


class InMemoryReasons:
    def __init__(self, attendance: InMemoryAttendance, directory: InMemoryDirectory):
        self.reasons: dict[str, AttendanceReason] = {}
        self._attendance = attendance
        self._directory = directory

    def create(self, *, attendance_id, student_id, reason_type, reason_text, submitted_at):
        if self.get_for_attendance(attendance_id):
            raise ConflictError("Record conflicts with an existing record")
        rid = _next_id("reason")
        self.reasons[rid] = AttendanceReason(
            reason_id=rid,
            attendance_id=attendance_id,
            student_id=student_id,
            reason_type=reason_type,
            reason_text=reason_text,
            status=ReasonStatus.PENDING,
            submitted_at=submitted_at,
        )
        return self.reasons[rid]

    def get_by_id(self, reason_id):
        return self.reasons.get(reason_id)

    def get_for_attendance(self, attendance_id):
        return next((r for r in self.reasons.values() if r.attendance_id == attendance_id), None)

    def _view(self, reason: AttendanceReason) -> ReasonView:
        event = self._attendance.get_by_id(reason.attendance_id)
        return ReasonView(
            reason=reason,
            student_name=self._directory.get_student(reason.student_id).name,
            date=event.date,
            attendance_status=event.status,
        )

    def get_view(self, reason_id):
        reason = self.reasons.get(reason_id)
        return self._view(reason) if reason else None

    def list_views(self, *, status=None, student_id=None):
        items = [
            r
            for r in self.reasons.values()
            if (status is None or r.status == status) and (student_id is None or r.student_id == student_id)
        ]
        items.sort(key=lambda r: r.submitted_at, reverse=True)
        return [self._view(r) for r in items]

    def set_status(self, reason_id: str, status: ReasonStatus) -> bool:
        reason = self.reasons[reason_id]
        if reason.status != ReasonStatus.PENDING:
            return False
        self.reasons[reason_id] = replace(reason, status=status)
        return True


class InMemoryApprovals:
    def __init__(self, reasons: InMemoryReasons):
        self.approvals: dict[str, AttendanceApproval] = {}
        self._reasons = reasons

    def record_decision(self, *, reason_id, attendance_id, instructor_id, approved, approval_notes, reviewed_at):
        status = ReasonStatus.APPROVED if approved else ReasonStatus.REJECTED
        if not self._reasons.set_status(reason_id, status):
            raise ConflictError("Reason already reviewed")
        aid = _next_id("approval")
        self.approvals[aid] = AttendanceApproval(
            approval_id=aid,
            reason_id=reason_id,
            attendance_id=attendance_id,
            instructor_id=instructor_id,
            approved=approved,
            reviewed_at=reviewed_at,
            approval_notes=approval_notes,
        )
        return self.approvals[aid]

    def list_for_reason(self, reason_id):
        return [a for a in self.approvals.values() if a.reason_id == reason_id]

    def list_by_reviewer(self, instructor_id):
        return [a for a in self.approvals.values() if a.instructor_id == instructor_id]


class InMemoryNotifications:
    def __init__(self):
        self.items: dict[str, Notification] = {}

    def create(self, *, user_id, notification_type, message, created_at, attendance_id=None, reason_id=None):
        nid = _next_id("notification")
        self.items[nid] = Notification(
            notification_id=nid,
            user_id=user_id,
            notification_type=notification_type,
            message=message,
            is_read=False,
            created_at=created_at,
            attendance_id=attendance_id,
            reason_id=reason_id,
        )
        return self.items[nid]

    def get_by_id(self, notification_id):
        return self.items.get(notification_id)

    def mark_read(self, *, notification_id, read_at):
        n = self.items.get(notification_id)
        if not n or n.is_read:
            return False
        self.items[notification_id] = replace(n, is_read=True, read_at=read_at)
        return True

    def mark_all_read(self, *, user_id, read_at):
        changed = 0
        for n in list(self.items.values()):
            if n.user_id == user_id and self.mark_read(notification_id=n.notification_id, read_at=read_at):
                changed += 1
        return changed

    def list_for_user(self, *, user_id, unread_only=False, limit=50):
        items = [n for n in self.items.values() if n.user_id == user_id and (not unread_only or not n.is_read)]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items[:limit]

    def count_unread(self, *, user_id):
        return sum(1 for n in self.items.values() if n.user_id == user_id and not n.is_read)

    def delete(self, *, notification_id):
        return self.items.pop(notification_id, None) is not None

    def for_user(self, user_id: str) -> list[Notification]:
        return [n for n in self.items.values() if n.user_id == user_id]


class FailingNotifications(InMemoryNotifications):
    """Every write fails the way a storage outage would."""

    def create(self, **kwargs):
        raise StorageError("Storage failure, please retry")


@dataclass
class Roster:
    """A small directory: one admin, one instructor teaching C1, one student account linked to S1."""

    directory: InMemoryDirectory
    admin_id: str
    instructor_id: str
    student_user_id: str
    other_student_user_id: str
    student_id: str
    other_student_id: str
    class_id: str
    unassigned_class_id: str


def build_roster() -> Roster:
    directory = InMemoryDirectory()
    admin_id = directory.create_user(username="admin", full_name="Admin", role=Role.ADMIN)
    instructor_id = directory.create_user(username="teach", full_name="Ms. Tran", role=Role.INSTRUCTOR)
    student_user_id = directory.create_user(username="an", full_name="Nguyen An", role=Role.STUDENT)
    other_user_id = directory.create_user(username="binh", full_name="Le Binh", role=Role.STUDENT)
    student_id = directory.create_student(name="Nguyen An", student_number="S001", user_id=student_user_id)
    other_student_id = directory.create_student(name="Le Binh", student_number="S002", user_id=other_user_id)
    class_id = directory.create_class(name="Math 101", code="M101", instructor_id=instructor_id)
    unassigned_class_id = directory.create_class(name="Art 101", code="A101")
    return Roster(
        directory=directory,
        admin_id=admin_id,
        instructor_id=instructor_id,
        student_user_id=student_user_id,
        other_student_user_id=other_user_id,
        student_id=student_id,
        other_student_id=other_student_id,
        class_id=class_id,
        unassigned_class_id=unassigned_class_id,
    )

from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.attendance_workflow.attendance_workflow.core.enums import (
    AttendanceStatus,
    NotificationType,
    ReasonStatus,
    ReasonType,
    Role,
)
from src.attendance_workflow.attendance_workflow.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.attendance_workflow.attendance_workflow.notifications.service import NotificationService
from src.attendance_workflow.attendance_workflow.reasons.service import ReasonService
from tests.fakes import (
    FailingNotifications,
    InMemoryAttendance,
    InMemoryNotifications,
    InMemoryReasons,
    build_roster,
)


@pytest.fixture
def env(fixed_now):
    roster = build_roster()
    attendance = InMemoryAttendance()
    reasons = InMemoryReasons(attendance, roster.directory)
    notifications = InMemoryNotifications()
    svc = ReasonService(reasons, attendance, roster.directory, NotificationService(notifications, roster.directory))
    event = attendance.create(
        student_id=roster.student_id,
        class_id=roster.class_id,
        work_date=date(2024, 3, 4),
        time_in=fixed_now,
        status=AttendanceStatus.LATE,
    )
    return roster, attendance, reasons, notifications, svc, event


def _submit(svc, roster, event, **overrides):
    kwargs = dict(
        user_id=roster.student_user_id,
        current_role=Role.STUDENT,
        attendance_id=event.attendance_id,
        reason_type="medical",
        reason_text="  Doctor visit  ",
    )
    kwargs.update(overrides)
    return svc.submit(**kwargs)


def test_submit_creates_pending_reason_listed_for_reviewers(env):
    roster, _, _, _, svc, event = env

    reason = _submit(svc, roster, event)

    assert reason.status == ReasonStatus.PENDING
    assert reason.reason_type == ReasonType.MEDICAL
    assert reason.reason_text == "Doctor visit"
    assert reason.student_id == roster.student_id

    pending = svc.list_pending(current_role=Role.INSTRUCTOR)
    assert [v.reason.reason_id for v in pending] == [reason.reason_id]
    assert pending[0].student_name == "Nguyen An"
    assert pending[0].attendance_status == AttendanceStatus.LATE


def test_submit_does_not_touch_the_event_status(env):
    roster, attendance, _, _, svc, event = env

    _submit(svc, roster, event)

    assert attendance.get_by_id(event.attendance_id).status == AttendanceStatus.LATE


def test_submit_notifies_class_instructor(env):
    roster, _, _, notifications, svc, event = env

    reason = _submit(svc, roster, event)

    sent = notifications.for_user(roster.instructor_id)
    assert len(sent) == 1
    assert sent[0].notification_type == NotificationType.REASON_SUBMITTED
    assert sent[0].reason_id == reason.reason_id


def test_submit_notifies_admins_when_class_has_no_instructor(env, fixed_now):
    roster, attendance, _, notifications, svc, _ = env
    event = attendance.create(
        student_id=roster.student_id,
        class_id=roster.unassigned_class_id,
        work_date=date(2024, 3, 4),
        time_in=fixed_now,
        status=AttendanceStatus.ABSENT,
    )

    _submit(svc, roster, event, reason_type="absence")

    assert [n.user_id for n in notifications.items.values()] == [roster.admin_id]


@pytest.mark.parametrize("reason_type", ["excuse", "", None, "MEDICAL"])
def test_submit_rejects_unknown_reason_type(env, reason_type):
    roster, _, _, _, svc, event = env

    with pytest.raises(ValidationError):
        _submit(svc, roster, event, reason_type=reason_type)


@pytest.mark.parametrize("text", ["", "   ", None, "x" * 501])
def test_submit_rejects_blank_or_oversized_text(env, text):
    roster, _, _, _, svc, event = env

    with pytest.raises(ValidationError):
        _submit(svc, roster, event, reason_text=text)


def test_submit_accepts_text_at_the_limit(env):
    roster, _, _, _, svc, event = env

    reason = _submit(svc, roster, event, reason_text="x" * 500)

    assert len(reason.reason_text) == 500


def test_submit_for_someone_elses_event_is_forbidden(env):
    roster, _, _, _, svc, event = env

    with pytest.raises(AuthorizationError):
        _submit(svc, roster, event, user_id=roster.other_student_user_id)


def test_submit_by_non_student_is_forbidden(env):
    roster, _, _, _, svc, event = env

    with pytest.raises(AuthorizationError):
        _submit(svc, roster, event, user_id=roster.instructor_id, current_role=Role.INSTRUCTOR)


def test_submit_unknown_event(env):
    roster, _, _, _, svc, event = env

    with pytest.raises(NotFoundError):
        _submit(svc, roster, event, attendance_id="missing")


def test_second_reason_for_same_event_conflicts(env):
    roster, _, _, _, svc, event = env
    _submit(svc, roster, event)

    with pytest.raises(ConflictError):
        _submit(svc, roster, event, reason_type="other", reason_text="again")


def test_list_pending_is_reviewer_only(env):
    _, _, _, _, svc, _ = env

    with pytest.raises(AuthorizationError):
        svc.list_pending(current_role=Role.STUDENT)
    with pytest.raises(AuthorizationError):
        svc.list_pending(current_role=Role.STAFF)
    assert svc.list_pending(current_role=Role.ADMIN) == []


def test_list_pending_newest_first(env, fixed_now):
    roster, attendance, _, _, svc, event = env
    older = _submit(svc, roster, event, now=fixed_now)
    other_event = attendance.create(
        student_id=roster.student_id,
        class_id=roster.class_id,
        work_date=date(2024, 3, 11),
        time_in=fixed_now + timedelta(days=7),
        status=AttendanceStatus.ABSENT,
    )
    newer = _submit(svc, roster, other_event, now=fixed_now + timedelta(days=7))

    pending = svc.list_pending(current_role=Role.ADMIN)

    assert [v.reason.reason_id for v in pending] == [newer.reason_id, older.reason_id]


def test_student_sees_only_own_reasons(env):
    roster, _, _, _, svc, event = env
    reason = _submit(svc, roster, event)

    own = svc.list_for_student(user_id=roster.student_user_id, current_role=Role.STUDENT, student_id=roster.student_id)
    assert [v.reason.reason_id for v in own] == [reason.reason_id]

    with pytest.raises(AuthorizationError):
        svc.list_for_student(
            user_id=roster.other_student_user_id, current_role=Role.STUDENT, student_id=roster.student_id
        )
    with pytest.raises(AuthorizationError):
        svc.get(user_id=roster.other_student_user_id, current_role=Role.STUDENT, reason_id=reason.reason_id)

    view = svc.get(user_id=roster.instructor_id, current_role=Role.INSTRUCTOR, reason_id=reason.reason_id)
    assert view.date == date(2024, 3, 4)


def test_get_unknown_reason(env):
    roster, _, _, _, svc, _ = env

    with pytest.raises(NotFoundError):
        svc.get(user_id=roster.admin_id, current_role=Role.ADMIN, reason_id="missing")


def test_submission_stands_when_notification_write_fails(fixed_now):
    roster = build_roster()
    attendance = InMemoryAttendance()
    reasons = InMemoryReasons(attendance, roster.directory)
    svc = ReasonService(
        reasons, attendance, roster.directory, NotificationService(FailingNotifications(), roster.directory)
    )
    event = attendance.create(
        student_id=roster.student_id,
        class_id=roster.class_id,
        work_date=date(2024, 3, 4),
        time_in=fixed_now,
        status=AttendanceStatus.LATE,
    )

    reason = svc.submit(
        user_id=roster.student_user_id,
        current_role=Role.STUDENT,
        attendance_id=event.attendance_id,
        reason_type="late_arrival",
        reason_text="Train delayed",
    )

    assert reason.status == ReasonStatus.PENDING
    assert reasons.get_for_attendance(event.attendance_id) == reason

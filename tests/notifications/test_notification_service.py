from __future__ import annotations

from datetime import timedelta

import pytest

from src.attendance_workflow.attendance_workflow.core.enums import NotificationType
from src.attendance_workflow.attendance_workflow.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.attendance_workflow.attendance_workflow.notifications.service import NotificationService
from tests.fakes import InMemoryNotifications, build_roster


@pytest.fixture
def env():
    roster = build_roster()
    repo = InMemoryNotifications()
    return roster, repo, NotificationService(repo, roster.directory)


def _notify(svc, recipient, now, message="hello"):
    return svc.notify(
        recipient_id=recipient, notification_type=NotificationType.LATE_ARRIVAL, message=message, now=now
    )


def test_notify_unknown_recipient(env, fixed_now):
    _, _, svc = env

    with pytest.raises(NotFoundError):
        _notify(svc, "ghost", fixed_now)


def test_notify_rejects_unknown_type(env):
    roster, _, svc = env

    with pytest.raises(ValidationError):
        svc.notify(recipient_id=roster.student_user_id, notification_type="party", message="hi")


def test_unread_after_two_notifies_and_one_read(env, fixed_now):
    roster, _, svc = env
    first = _notify(svc, roster.student_user_id, fixed_now)
    _notify(svc, roster.student_user_id, fixed_now + timedelta(minutes=1))

    svc.mark_read(user_id=roster.student_user_id, notification_id=first.notification_id)

    unread = svc.list_unread(user_id=roster.student_user_id)
    assert len(unread) == 1
    assert unread[0].notification_id != first.notification_id


def test_mark_read_twice_is_a_noop(env, fixed_now):
    roster, _, svc = env
    n = _notify(svc, roster.student_user_id, fixed_now)

    once = svc.mark_read(user_id=roster.student_user_id, notification_id=n.notification_id, now=fixed_now)
    twice = svc.mark_read(
        user_id=roster.student_user_id, notification_id=n.notification_id, now=fixed_now + timedelta(hours=1)
    )

    assert once.is_read and twice.is_read
    assert twice.read_at == once.read_at


def test_mark_all_read_empties_unread(env, fixed_now):
    roster, _, svc = env
    for i in range(3):
        _notify(svc, roster.student_user_id, fixed_now + timedelta(minutes=i))
    _notify(svc, roster.instructor_id, fixed_now)

    assert svc.mark_all_read(user_id=roster.student_user_id) == 3
    assert svc.list_unread(user_id=roster.student_user_id) == []
    assert svc.unread_count(user_id=roster.instructor_id) == 1


def test_list_all_newest_first_and_limited(env, fixed_now):
    roster, _, svc = env
    created = [_notify(svc, roster.student_user_id, fixed_now + timedelta(minutes=i), f"m{i}") for i in range(5)]

    items = svc.list_all(user_id=roster.student_user_id, limit=3)

    assert [n.message for n in items] == ["m4", "m3", "m2"]
    assert len(svc.list_all(user_id=roster.student_user_id, limit=0)) == 1
    assert len(created) == 5


def test_only_recipient_may_read_or_delete(env, fixed_now):
    roster, repo, svc = env
    n = _notify(svc, roster.student_user_id, fixed_now)

    with pytest.raises(AuthorizationError):
        svc.mark_read(user_id=roster.instructor_id, notification_id=n.notification_id)
    with pytest.raises(AuthorizationError):
        svc.delete(user_id=roster.instructor_id, notification_id=n.notification_id)

    svc.delete(user_id=roster.student_user_id, notification_id=n.notification_id)
    assert repo.items == {}
    with pytest.raises(NotFoundError):
        svc.delete(user_id=roster.student_user_id, notification_id=n.notification_id)


def test_notify_many_skips_missing_and_duplicate_recipients(env):
    roster, _, svc = env

    created = svc.notify_many(
        recipient_ids=[roster.student_user_id, None, roster.student_user_id, roster.instructor_id],
        notification_type=NotificationType.LATE_ARRIVAL,
        message="late",
    )

    assert sorted(n.user_id for n in created) == sorted([roster.student_user_id, roster.instructor_id])

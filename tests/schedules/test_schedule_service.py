from __future__ import annotations

from datetime import time

import pytest

from src.attendance_workflow.attendance_workflow.core.enums import Role
from src.attendance_workflow.attendance_workflow.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.attendance_workflow.attendance_workflow.schedules.service import ScheduleService
from tests.fakes import InMemorySchedules, build_roster


@pytest.fixture
def env():
    roster = build_roster()
    schedules = InMemorySchedules()
    return roster, schedules, ScheduleService(schedules, roster.directory)


def test_assign_uses_default_threshold(env):
    roster, _, svc = env

    entry = svc.assign(
        current_role=Role.ADMIN, class_id=roster.class_id, day_of_week=1, start_time="09:00", end_time="10:30"
    )

    assert entry.start_time == time(9, 0)
    assert entry.late_threshold_minutes == 15
    assert svc.list_for_class(roster.class_id) == [entry]


def test_assign_same_day_replaces_entry(env):
    roster, schedules, svc = env
    first = svc.assign(
        current_role=Role.ADMIN, class_id=roster.class_id, day_of_week=1, start_time="09:00", end_time="10:30"
    )

    second = svc.assign(
        current_role=Role.ADMIN,
        class_id=roster.class_id,
        day_of_week=1,
        start_time="08:00",
        end_time="09:30",
        late_threshold_minutes=5,
    )

    assert second.schedule_id == first.schedule_id
    assert len(schedules.entries) == 1
    assert schedules.get_for_class_and_day(class_id=roster.class_id, day_of_week=1).start_time == time(8, 0)


@pytest.mark.parametrize(
    "day,start,end,threshold",
    [
        (7, "09:00", "10:00", 15),
        (-1, "09:00", "10:00", 15),
        ("mon", "09:00", "10:00", 15),
        (1, "9am", "10:00", 15),
        (1, "10:00", "09:00", 15),
        (1, "09:00", "09:00", 15),
        (1, "09:00", "10:00", -5),
    ],
)
def test_assign_validation(env, day, start, end, threshold):
    roster, _, svc = env

    with pytest.raises(ValidationError):
        svc.assign(
            current_role=Role.ADMIN,
            class_id=roster.class_id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            late_threshold_minutes=threshold,
        )


def test_assign_requires_admin_and_known_class(env):
    roster, _, svc = env

    with pytest.raises(AuthorizationError):
        svc.assign(
            current_role=Role.INSTRUCTOR, class_id=roster.class_id, day_of_week=1, start_time="09:00", end_time="10:00"
        )
    with pytest.raises(NotFoundError):
        svc.assign(current_role=Role.ADMIN, class_id="missing", day_of_week=1, start_time="09:00", end_time="10:00")


def test_delete(env):
    roster, schedules, svc = env
    entry = svc.assign(
        current_role=Role.ADMIN, class_id=roster.class_id, day_of_week=3, start_time="13:00", end_time="14:00"
    )

    svc.delete(current_role=Role.ADMIN, schedule_id=entry.schedule_id)

    assert schedules.entries == {}
    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.ADMIN, schedule_id=entry.schedule_id)

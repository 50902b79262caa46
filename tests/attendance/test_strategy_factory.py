from datetime import datetime, time, timedelta, timezone

from src.attendance_workflow.attendance_workflow.attendance.factory import ArrivalStrategyFactory
from src.attendance_workflow.attendance_workflow.attendance.strategies.indeterminate_strategy import (
    IndeterminateStrategy,
)
from src.attendance_workflow.attendance_workflow.attendance.strategies.late_strategy import LateStrategy
from src.attendance_workflow.attendance_workflow.attendance.strategies.on_time_strategy import OnTimeStrategy
from src.attendance_workflow.attendance_workflow.schedules.model import ScheduleEntry

SCHEDULE = ScheduleEntry(
    schedule_id="sch-1",
    class_id="C1",
    day_of_week=1,
    start_time=time(9, 0),
    end_time=time(10, 30),
    late_threshold_minutes=15,
)
BOUNDARY = datetime(2024, 3, 4, 9, 15, tzinfo=timezone.utc)


def test_factory_arrival_on_boundary_is_on_time():
    factory = ArrivalStrategyFactory()
    strategy = factory.for_arrival(arrival=BOUNDARY, schedule=SCHEDULE, late_boundary=BOUNDARY)

    assert isinstance(strategy, OnTimeStrategy)


def test_factory_arrival_after_boundary_is_late():
    factory = ArrivalStrategyFactory()
    strategy = factory.for_arrival(
        arrival=BOUNDARY + timedelta(seconds=1), schedule=SCHEDULE, late_boundary=BOUNDARY
    )

    assert isinstance(strategy, LateStrategy)


def test_factory_without_schedule_is_indeterminate():
    factory = ArrivalStrategyFactory()
    strategy = factory.for_arrival(arrival=BOUNDARY, schedule=None, late_boundary=None)

    assert isinstance(strategy, IndeterminateStrategy)

from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from ..common.datetime_utils import day_of_week
from ..core.exceptions import ValidationError
from ..schedules.repository import ScheduleRepository
from .factory import ArrivalStrategyFactory
from .model import ArrivalClassification


class LateArrivalDetector:
    """Classify an arrival instant against the Schedule Registry.

    All wall-clock reasoning happens in one configured institution zone: the
    arrival is converted to that zone, its local date picks the weekday
    entry, and the entry's start time is anchored on that local date. No
    side effects; notifying on a late result is the caller's decision.
    """

    def __init__(
        self,
        schedules: ScheduleRepository,
        *,
        zone: tzinfo = timezone.utc,
        strategy_factory: Optional[ArrivalStrategyFactory] = None,
    ):
        self._schedules = schedules
        self._zone = zone
        self._factory = strategy_factory or ArrivalStrategyFactory()

    @property
    def zone(self) -> tzinfo:
        return self._zone

    def classify(self, *, student_id: str, class_id: str, arrival: datetime) -> ArrivalClassification:
        if arrival.tzinfo is None:
            raise ValidationError("arrival must be timezone-aware")

        local_arrival = arrival.astimezone(self._zone)
        schedule = self._schedules.get_for_class_and_day(
            class_id=class_id,
            day_of_week=day_of_week(local_arrival.date()),
        )

        scheduled_start = None
        late_boundary = None
        if schedule:
            scheduled_start = datetime.combine(local_arrival.date(), schedule.start_time, tzinfo=self._zone)
            late_boundary = scheduled_start + timedelta(minutes=int(schedule.late_threshold_minutes))

        strategy = self._factory.for_arrival(arrival=local_arrival, schedule=schedule, late_boundary=late_boundary)
        return strategy.classify(
            arrival=local_arrival,
            schedule=schedule,
            scheduled_start=scheduled_start,
            late_boundary=late_boundary,
        )

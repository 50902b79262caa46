from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...schedules.model import ScheduleEntry
from ..model import ArrivalClassification
from .base import ArrivalStrategy, margin_minutes


class LateStrategy(ArrivalStrategy):
    """Arrival strictly after the late boundary."""

    def classify(
        self,
        *,
        arrival: datetime,
        schedule: Optional[ScheduleEntry],
        scheduled_start: Optional[datetime],
        late_boundary: Optional[datetime],
    ) -> ArrivalClassification:
        return ArrivalClassification(
            arrival=arrival,
            is_late=True,
            schedule_start=schedule.start_time,
            threshold_minutes=schedule.late_threshold_minutes,
            late_boundary=late_boundary,
            margin_minutes=margin_minutes(arrival, scheduled_start),
        )

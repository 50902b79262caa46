from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...schedules.model import ScheduleEntry
from ..model import ArrivalClassification
from .base import ArrivalStrategy


class IndeterminateStrategy(ArrivalStrategy):
    """No schedule for the class on that weekday."""

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
            is_late=None,
            reason="No schedule found for this class on this day",
        )

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...schedules.model import ScheduleEntry
from ..model import ArrivalClassification


class ArrivalStrategy(ABC):
    """Strategy Pattern: encapsulate how an arrival is classified."""

    @abstractmethod
    def classify(
        self,
        *,
        arrival: datetime,
        schedule: Optional[ScheduleEntry],
        scheduled_start: Optional[datetime],
        late_boundary: Optional[datetime],
    ) -> ArrivalClassification:
        raise NotImplementedError


def margin_minutes(arrival: datetime, scheduled_start: datetime) -> int:
    """Whole minutes between scheduled start and arrival (negative when early)."""
    return int((arrival - scheduled_start).total_seconds() // 60)

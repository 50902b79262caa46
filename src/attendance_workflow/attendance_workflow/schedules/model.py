from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..common.serialization import to_dict
from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES


@dataclass(frozen=True)
class ScheduleEntry:
    """Expected meeting window of a class on one weekday (0=Sunday)."""

    schedule_id: str
    class_id: str
    day_of_week: int
    start_time: time
    end_time: time
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES

    def to_dict(self) -> dict:
        return to_dict(self, rename={"schedule_id": "id"})

from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import ScheduleEntry


class ScheduleRepository(Protocol):
    def get_for_class_and_day(self, *, class_id: str, day_of_week: int) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def get_by_id(self, schedule_id: str) -> Optional[ScheduleEntry]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        class_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
        late_threshold_minutes: int,
    ) -> str:
        """Create or replace the entry for (class, day).

        Returns schedule_id.
        """

        raise NotImplementedError

    def delete(self, *, schedule_id: str) -> bool:
        raise NotImplementedError

    def list_for_class(self, *, class_id: str) -> Sequence[ScheduleEntry]:
        raise NotImplementedError

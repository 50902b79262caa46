from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..schedules.model import ScheduleEntry
from .strategies.base import ArrivalStrategy
from .strategies.indeterminate_strategy import IndeterminateStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class ArrivalStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_arrival(
        self,
        *,
        arrival: datetime,
        schedule: Optional[ScheduleEntry],
        late_boundary: Optional[datetime],
    ) -> ArrivalStrategy:
        if not schedule or late_boundary is None:
            return IndeterminateStrategy()

        if arrival > late_boundary:
            return LateStrategy()
        return OnTimeStrategy()

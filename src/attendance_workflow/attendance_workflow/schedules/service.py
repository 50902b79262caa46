from __future__ import annotations

from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import parse_hhmm
from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import DirectoryRepository
from .model import ScheduleEntry
from .repository import ScheduleRepository

logger = get_logger("schedules")


class ScheduleService:
    """Schedule Registry administration. The workflow itself only reads entries."""

    def __init__(self, schedules: ScheduleRepository, directory: DirectoryRepository):
        self._schedules = schedules
        self._directory = directory

    def assign(
        self,
        *,
        current_role: Role,
        class_id: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
        late_threshold_minutes: Optional[int] = None,
    ) -> ScheduleEntry:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can manage schedules")

        try:
            day = int(day_of_week)
        except (TypeError, ValueError):
            raise ValidationError("day_of_week must be an integer 0-6")
        if day < 0 or day > 6:
            raise ValidationError("day_of_week must be an integer 0-6")

        start = parse_hhmm(start_time, "start_time")
        end = parse_hhmm(end_time, "end_time")
        if end <= start:
            raise ValidationError("end_time must be after start_time")

        threshold = DEFAULT_LATE_THRESHOLD_MINUTES if late_threshold_minutes is None else late_threshold_minutes
        try:
            threshold = int(threshold)
        except (TypeError, ValueError):
            raise ValidationError("late_threshold_minutes must be an integer")
        if threshold < 0:
            raise ValidationError("late_threshold_minutes must not be negative")

        if not self._directory.get_class(class_id):
            raise NotFoundError("Class not found")

        schedule_id = self._schedules.upsert(
            class_id=class_id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            late_threshold_minutes=threshold,
        )
        logger.info("Schedule set for class=%s day=%s (%s-%s, +%smin)", class_id, day, start, end, threshold)
        entry = self._schedules.get_by_id(schedule_id)
        if not entry:
            raise NotFoundError("Schedule not found")
        return entry

    def delete(self, *, current_role: Role, schedule_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can manage schedules")

        if not self._schedules.delete(schedule_id=schedule_id):
            raise NotFoundError("Schedule not found")

    def list_for_class(self, class_id: str) -> Sequence[ScheduleEntry]:
        return self._schedules.list_for_class(class_id=class_id)

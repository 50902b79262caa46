from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, new_id, normalize_time
from .model import ScheduleEntry
from .repository import ScheduleRepository

_COLUMNS = "id, class_id, day_of_week, start_time, end_time, late_threshold_minutes"


def _to_entry(r: dict) -> ScheduleEntry:
    return ScheduleEntry(
        schedule_id=r["id"],
        class_id=r["class_id"],
        day_of_week=int(r["day_of_week"]),
        start_time=normalize_time(r["start_time"]),
        end_time=normalize_time(r["end_time"]),
        late_threshold_minutes=int(r["late_threshold_minutes"]),
    )


class SqlScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_class_and_day(self, *, class_id: str, day_of_week: int) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_schedules WHERE class_id=? AND day_of_week=?",
                (class_id, int(day_of_week)),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_by_id(self, schedule_id: str) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM class_schedules WHERE id=?", (schedule_id,))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def upsert(
        self,
        *,
        class_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
        late_threshold_minutes: int,
    ) -> str:
        now = now_utc()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id FROM class_schedules WHERE class_id=? AND day_of_week=?",
                (class_id, int(day_of_week)),
            )
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    """
                    UPDATE class_schedules
                    SET start_time=?, end_time=?, late_threshold_minutes=?, updated_at=?
                    WHERE id=?
                    """,
                    (start_time, end_time, int(late_threshold_minutes), now, existing["id"]),
                )
                return existing["id"]

            schedule_id = new_id()
            cur.execute(
                """
                INSERT INTO class_schedules(
                    id, class_id, day_of_week, start_time, end_time, late_threshold_minutes, created_at, updated_at
                )
                VALUES(?,?,?,?,?,?,?,?)
                """,
                (schedule_id, class_id, int(day_of_week), start_time, end_time, int(late_threshold_minutes), now, now),
            )
            return schedule_id

    def delete(self, *, schedule_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM class_schedules WHERE id=?", (schedule_id,))
            return cur.rowcount > 0

    def list_for_class(self, *, class_id: str) -> Sequence[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_schedules WHERE class_id=? ORDER BY day_of_week ASC",
                (class_id,),
            )
            return [_to_entry(r) for r in fetchall(cur)]

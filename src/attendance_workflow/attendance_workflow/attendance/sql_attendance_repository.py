from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.sql_base import (
    db_cursor,
    fetchall,
    fetchone,
    new_id,
    normalize_date,
    normalize_datetime,
)
from .model import AttendanceEvent, AttendanceSummary, ClassReportRow
from .repository import AttendanceRepository

_COLUMNS = "id, student_id, class_id, date, time_in, time_out, status, notes"
_UPDATABLE = ("status", "notes", "time_out")


def _to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        attendance_id=r["id"],
        student_id=r["student_id"],
        class_id=r["class_id"],
        date=normalize_date(r["date"]),
        time_in=normalize_datetime(r.get("time_in")),
        time_out=normalize_datetime(r.get("time_out")),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class SqlAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        student_id: str,
        class_id: str,
        work_date: date,
        time_in: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceEvent:
        attendance_id = new_id()
        now = now_utc()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(id, student_id, class_id, date, time_in, status, notes, created_at, updated_at)
                VALUES(?,?,?,?,?,?,?,?,?)
                """,
                (attendance_id, student_id, class_id, work_date, time_in, status.value, notes, now, now),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=?", (attendance_id,))
            return _to_event(fetchone(cur))

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=?", (attendance_id,))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def update_fields(self, *, attendance_id: str, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - set(_UPDATABLE)
        if unknown:
            raise ValidationError(f"Fields not updatable: {', '.join(sorted(unknown))}")

        assignments: list[str] = []
        params: list[object] = []
        for name in _UPDATABLE:
            if name in fields:
                value = fields[name]
                assignments.append(f"{name}=?")
                params.append(value.value if isinstance(value, AttendanceStatus) else value)
        assignments.append("updated_at=?")
        params.append(now_utc())

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance SET {', '.join(assignments)} WHERE id=?",
                tuple(params + [attendance_id]),
            )
            return cur.rowcount > 0

    def list_events(
        self,
        *,
        student_id: Optional[str] = None,
        class_id: Optional[str] = None,
        work_date: Optional[date] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["1=1"]
        params: list[object] = []

        if student_id:
            clauses.append("student_id=?")
            params.append(student_id)
        if class_id:
            clauses.append("class_id=?")
            params.append(class_id)
        if work_date:
            clauses.append("date=?")
            params.append(work_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE {where} ORDER BY date DESC, time_in DESC",
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def get_summary(self, *, student_id: str, class_id: Optional[str] = None) -> Sequence[AttendanceSummary]:
        clauses = ["student_id=?"]
        params: list[object] = [student_id]
        if class_id:
            clauses.append("class_id=?")
            params.append(class_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    student_id,
                    class_id,
                    COUNT(*) AS total_sessions,
                    SUM(CASE WHEN status = 'present' THEN 1 ELSE 0 END) AS present_count,
                    SUM(CASE WHEN status = 'absent' THEN 1 ELSE 0 END) AS absent_count,
                    SUM(CASE WHEN status = 'late' THEN 1 ELSE 0 END) AS late_count
                FROM attendance
                WHERE {where}
                GROUP BY student_id, class_id
                ORDER BY class_id
                """,
                tuple(params),
            )
            return [
                AttendanceSummary(
                    student_id=r["student_id"],
                    class_id=r["class_id"],
                    total_sessions=int(r["total_sessions"] or 0),
                    present_count=int(r["present_count"] or 0),
                    absent_count=int(r["absent_count"] or 0),
                    late_count=int(r["late_count"] or 0),
                )
                for r in fetchall(cur)
            ]

    def get_class_report(self, *, class_id: str, work_date: Optional[date] = None) -> Sequence[ClassReportRow]:
        clauses = ["a.class_id=?"]
        params: list[object] = [class_id]
        if work_date:
            clauses.append("a.date=?")
            params.append(work_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.id, a.student_id, s.name AS student_name, s.student_number,
                    a.status, a.date, a.time_in, a.notes
                FROM attendance a
                JOIN students s ON s.id = a.student_id
                WHERE {where}
                ORDER BY a.date DESC, s.name ASC
                """,
                tuple(params),
            )
            return [
                ClassReportRow(
                    attendance_id=r["id"],
                    student_id=r["student_id"],
                    student_name=r["student_name"],
                    student_number=r["student_number"],
                    status=AttendanceStatus(r["status"]),
                    date=normalize_date(r["date"]),
                    time_in=normalize_datetime(r.get("time_in")),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]

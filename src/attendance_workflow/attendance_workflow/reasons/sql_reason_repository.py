from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, ReasonStatus, ReasonType
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, new_id, normalize_date, normalize_datetime
from .model import AttendanceReason, ReasonView
from .repository import ReasonRepository

_COLUMNS = "id, attendance_id, student_id, reason_type, reason_text, status, submitted_at"


def _to_reason(r: dict) -> AttendanceReason:
    return AttendanceReason(
        reason_id=r["id"],
        attendance_id=r["attendance_id"],
        student_id=r["student_id"],
        reason_type=ReasonType(r["reason_type"]),
        reason_text=r["reason_text"],
        status=ReasonStatus(r["status"]),
        submitted_at=normalize_datetime(r["submitted_at"]),
    )


def _to_view(r: dict) -> ReasonView:
    return ReasonView(
        reason=_to_reason(r),
        student_name=r["student_name"],
        date=normalize_date(r["date"]),
        attendance_status=AttendanceStatus(r["attendance_status"]),
    )


class SqlReasonRepository(ReasonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        attendance_id: str,
        student_id: str,
        reason_type: ReasonType,
        reason_text: str,
        submitted_at: datetime,
    ) -> AttendanceReason:
        reason_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_reasons(
                    id, attendance_id, student_id, reason_type, reason_text, status, submitted_at, updated_at
                )
                VALUES(?,?,?,?,?,?,?,?)
                """,
                (
                    reason_id,
                    attendance_id,
                    student_id,
                    reason_type.value,
                    reason_text,
                    ReasonStatus.PENDING.value,
                    submitted_at,
                    submitted_at,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_reasons WHERE id=?", (reason_id,))
            return _to_reason(fetchone(cur))

    def get_by_id(self, reason_id: str) -> Optional[AttendanceReason]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_reasons WHERE id=?", (reason_id,))
            r = fetchone(cur)
            return _to_reason(r) if r else None

    def get_for_attendance(self, attendance_id: str) -> Optional[AttendanceReason]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_reasons WHERE attendance_id=?", (attendance_id,))
            r = fetchone(cur)
            return _to_reason(r) if r else None

    def get_view(self, reason_id: str) -> Optional[ReasonView]:
        views = self._select_views(["ar.id=?"], [reason_id])
        return views[0] if views else None

    def list_views(
        self,
        *,
        status: Optional[ReasonStatus] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[ReasonView]:
        clauses: list[str] = []
        params: list[object] = []
        if status is not None:
            clauses.append("ar.status=?")
            params.append(status.value)
        if student_id is not None:
            clauses.append("ar.student_id=?")
            params.append(student_id)
        return self._select_views(clauses, params)

    def _select_views(self, clauses: list[str], params: list[object]) -> list[ReasonView]:
        where = " AND ".join(clauses) if clauses else "1=1"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ar.id, ar.attendance_id, ar.student_id, ar.reason_type, ar.reason_text,
                       ar.status, ar.submitted_at,
                       s.name AS student_name, a.date, a.status AS attendance_status
                FROM attendance_reasons ar
                JOIN students s ON s.id = ar.student_id
                JOIN attendance a ON a.id = ar.attendance_id
                WHERE {where}
                ORDER BY ar.submitted_at DESC
                """,
                tuple(params),
            )
            return [_to_view(r) for r in fetchall(cur)]

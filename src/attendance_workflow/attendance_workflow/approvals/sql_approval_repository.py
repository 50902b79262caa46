from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ReasonStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, new_id, normalize_bool, normalize_datetime
from .model import AttendanceApproval
from .repository import ApprovalRepository

_COLUMNS = "id, reason_id, attendance_id, instructor_id, approved, approval_notes, reviewed_at"


def _to_approval(r: dict) -> AttendanceApproval:
    return AttendanceApproval(
        approval_id=r["id"],
        reason_id=r["reason_id"],
        attendance_id=r["attendance_id"],
        instructor_id=r["instructor_id"],
        approved=normalize_bool(r["approved"]),
        reviewed_at=normalize_datetime(r["reviewed_at"]),
        approval_notes=r.get("approval_notes"),
    )


class SqlApprovalRepository(ApprovalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record_decision(
        self,
        *,
        reason_id: str,
        attendance_id: str,
        instructor_id: str,
        approved: bool,
        approval_notes: Optional[str],
        reviewed_at: datetime,
    ) -> AttendanceApproval:
        status = ReasonStatus.APPROVED if approved else ReasonStatus.REJECTED
        approval_id = new_id()

        with db_cursor(self._conn_factory) as (_, cur):
            # Guarded transition: only a PENDING reason may be decided.
            cur.execute(
                "UPDATE attendance_reasons SET status=?, updated_at=? WHERE id=? AND status=?",
                (status.value, reviewed_at, reason_id, ReasonStatus.PENDING.value),
            )
            if cur.rowcount == 0:
                raise ConflictError("Reason already reviewed")

            cur.execute(
                """
                INSERT INTO attendance_approvals(
                    id, reason_id, attendance_id, instructor_id, approved, approval_notes, reviewed_at
                )
                VALUES(?,?,?,?,?,?,?)
                """,
                (approval_id, reason_id, attendance_id, instructor_id, approved, approval_notes, reviewed_at),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_approvals WHERE id=?", (approval_id,))
            return _to_approval(fetchone(cur))

    def list_for_reason(self, reason_id: str) -> Sequence[AttendanceApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_approvals WHERE reason_id=? ORDER BY reviewed_at DESC",
                (reason_id,),
            )
            return [_to_approval(r) for r in fetchall(cur)]

    def list_by_reviewer(self, instructor_id: str) -> Sequence[AttendanceApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_approvals WHERE instructor_id=? ORDER BY reviewed_at DESC",
                (instructor_id,),
            )
            return [_to_approval(r) for r in fetchall(cur)]

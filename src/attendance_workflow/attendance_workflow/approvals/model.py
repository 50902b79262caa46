from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.serialization import to_dict


@dataclass(frozen=True)
class AttendanceApproval:
    """A reviewer's binding decision on one reason."""

    approval_id: str
    reason_id: str
    attendance_id: str
    instructor_id: str
    approved: bool
    reviewed_at: datetime
    approval_notes: Optional[str] = None

    def to_dict(self) -> dict:
        return to_dict(self, rename={"approval_id": "id"})

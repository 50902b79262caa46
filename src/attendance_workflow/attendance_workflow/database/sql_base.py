from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.exceptions import ConflictError, StorageError
from .connection import DatabaseConnection


class QueryCursor:
    """Cursor wrapper: placeholder rewriting, parameter adaptation, dict rows."""

    def __init__(self, conn_factory: DatabaseConnection, cur):
        self._factory = conn_factory
        self._cur = cur

    def execute(self, query: str, params: Sequence[Any] = ()) -> None:
        self._cur.execute(self._factory.sql(query), self._factory.adapt_params(params))

    @property
    def rowcount(self) -> int:
        return int(self._cur.rowcount or 0)

    def fetchone(self) -> Optional[Dict[str, Any]]:
        row = self._cur.fetchone()
        return dict(row) if row else None

    def fetchall(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in (self._cur.fetchall() or [])]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection) -> Iterator[Tuple[Any, QueryCursor]]:
    """Run the enclosed statements as one transaction.

    Commits on success; any exception rolls everything back. Driver errors are
    translated so callers never see backend-specific exception types or
    query text.
    """

    conn = conn_factory.connect()
    try:
        cur = conn_factory.open_cursor(conn)
        try:
            yield conn, QueryCursor(conn_factory, cur)
            conn.commit()
        finally:
            cur.close()
    except conn_factory.integrity_errors as e:
        conn.rollback()
        # Only unique-key violations are conflicts; FK and NOT NULL failures are storage faults.
        if conn_factory.is_unique_violation(e):
            raise ConflictError("Record conflicts with an existing record") from e
        raise StorageError("Storage failure, please retry") from e
    except conn_factory.driver_errors as e:
        conn.rollback()
        raise StorageError("Storage failure, please retry") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur: QueryCursor) -> Optional[Dict[str, Any]]:
    return cur.fetchone()


def fetchall(cur: QueryCursor) -> List[Dict[str, Any]]:
    return cur.fetchall()


def new_id() -> str:
    return str(uuid.uuid4())


def normalize_time(value: Any) -> Optional[time]:
    """Normalize TIME values across drivers.

    Drivers can return TIME as:
    - datetime.time
    - datetime.timedelta (mysql-connector)
    - string (e.g. '08:30:00', SQLite)
    """

    if value is None:
        return None

    if isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        total_seconds = int(value.total_seconds()) % 86400
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60
        return time(hour=hours, minute=minutes, second=seconds)

    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = int(float(parts[2])) if len(parts) >= 3 and parts[2] else 0
        return time(hour=hours, minute=minutes, second=seconds)

    raise TypeError(f"Unsupported TIME value type: {type(value)!r}")


def normalize_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Unsupported DATE value type: {type(value)!r}")


def normalize_datetime(value: Any) -> Optional[datetime]:
    """Stored timestamps are naive UTC; hand them out as aware UTC."""

    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if not isinstance(value, datetime):
        raise TypeError(f"Unsupported DATETIME value type: {type(value)!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t"}
    return bool(value)

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.attendance_workflow.attendance_workflow.container import build_container
from src.attendance_workflow.attendance_workflow.database.bootstrap import apply_schema, default_schema_path
from src.attendance_workflow.attendance_workflow.main import create_app


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 2024-03-04, 09:20 UTC
    return datetime(2024, 3, 4, 9, 20, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "attendance.db"


@pytest.fixture
def container(db_path):
    c = build_container(backend="sqlite", db_config={"path": str(db_path)}, timezone="UTC")
    apply_schema(c.conn, schema_path=default_schema_path())
    return c


@pytest.fixture
def app(db_path):
    app = create_app(
        {
            "SECRET_KEY": "test-secret",
            "DB_BACKEND": "sqlite",
            "DB_CONFIG": {"path": str(db_path)},
            "TIMEZONE": "UTC",
            "AUTO_INIT_DB": True,
            "LOG_LEVEL": "WARNING",
            "TESTING": True,
        }
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_container(app):
    return app.extensions["attendance_workflow"]


@pytest.fixture
def login(client):
    """Act as ``user_id`` with ``role`` on the next requests (the identity layer writes the session)."""

    def _login(user_id: str, role: str) -> None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
            sess["role"] = role

    return _login

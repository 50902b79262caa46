"""Seed demo accounts, students, classes and a weekly schedule.

Safe to run once on an empty database; usernames, student numbers and class
codes are unique, so a second run stops with a conflict.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_workflow.attendance_workflow.container import build_container
from src.attendance_workflow.attendance_workflow.core.enums import Role
from src.attendance_workflow.attendance_workflow.database.bootstrap import apply_schema, default_schema_path

DEMO_STUDENTS = [
    ("Nguyen Van An", "SV001", "an"),
    ("Tran Thi Binh", "SV002", "binh"),
    ("Le Minh Chau", "SV003", "chau"),
]

# (day_of_week with Sunday=0, start, end)
DEMO_SCHEDULE = [(1, "08:00", "09:30"), (3, "08:00", "09:30"), (5, "13:00", "14:30")]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        backend=settings.DB_BACKEND,
        db_config=dict(settings.DB_CONFIG),
        timezone=getattr(settings, "TIMEZONE", "UTC"),
    )
    apply_schema(container.conn, schema_path=default_schema_path())

    directory = container.directory_repo
    directory.create_user(username="admin", full_name="Administrator", role=Role.ADMIN)
    instructor_id = directory.create_user(username="instructor", full_name="Demo Instructor", role=Role.INSTRUCTOR)
    class_id = directory.create_class(name="Introduction to Programming", code="CS101", instructor_id=instructor_id)

    for name, number, username in DEMO_STUDENTS:
        user_id = directory.create_user(username=username, full_name=name, role=Role.STUDENT)
        directory.create_student(name=name, student_number=number, user_id=user_id)

    for day, start, end in DEMO_SCHEDULE:
        container.schedule_service.assign(
            current_role=Role.ADMIN, class_id=class_id, day_of_week=day, start_time=start, end_time=end
        )

    print(f"OK: Seeded database -> {container.conn.backend} (class CS101, {len(DEMO_STUDENTS)} students)")


if __name__ == "__main__":
    main()

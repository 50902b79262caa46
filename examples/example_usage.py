"""Example: drive the service layer directly (no Flask).

Controllers are thin; the workflow lives in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_workflow.attendance_workflow.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        backend=settings.DB_BACKEND,
        db_config=settings.DB_CONFIG,
        timezone=getattr(settings, "TIMEZONE", "UTC"),
    )
    for row in container.attendance_service.list_events()[:5]:
        print(row.to_dict())


if __name__ == "__main__":
    main()

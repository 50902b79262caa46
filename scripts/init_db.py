from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_workflow.attendance_workflow.database.bootstrap import apply_schema, default_schema_path, list_tables
from src.attendance_workflow.attendance_workflow.database.connection import build_connection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = build_connection(settings.DB_BACKEND, dict(settings.DB_CONFIG))

    apply_schema(conn, schema_path=default_schema_path())
    tables = list_tables(conn)
    print(f"OK: Applied schema.sql -> {conn.backend} (tables={len(tables)})")


if __name__ == "__main__":
    main()

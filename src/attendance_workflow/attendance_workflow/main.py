from __future__ import annotations

import importlib
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .approvals.controller import register as register_approvals
from .attendance.controller import register as register_attendance
from .common.app_logger import get_logger, setup_logging
from .common.web import register_error_handlers
from .container import build_container
from .core.constants import DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, default_schema_path, list_tables
from .notifications.controller import register as register_notifications
from .reasons.controller import register as register_reasons
from .schedules.controller import register as register_schedules


def _setting(settings: Any, name: str, default: Any = None) -> Any:
    if isinstance(settings, Mapping):
        return settings.get(name, default)
    return getattr(settings, name, default)


def create_app(settings: Optional[Any] = None) -> Flask:
    """Build the JSON API.

    ``settings`` may be a module/object or a mapping; without it the module
    named by ``APP_ENV`` is used.
    """

    load_dotenv(override=False)
    if settings is None:
        settings = importlib.import_module(get_settings_module())

    setup_logging(_setting(settings, "LOG_LEVEL", "INFO"))
    logger = get_logger("app")

    app = Flask(__name__)
    app.secret_key = _setting(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(_setting(settings, "DEBUG", False))
    app.config["TESTING"] = bool(_setting(settings, "TESTING", False))
    app.json.sort_keys = False

    backend = str(_setting(settings, "DB_BACKEND", "sqlite"))
    db_config = dict(_setting(settings, "DB_CONFIG", {}) or {})
    container = build_container(
        backend=backend,
        db_config=db_config,
        timezone=str(_setting(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
    )

    if _setting(settings, "AUTO_INIT_DB", False):
        apply_schema(container.conn, schema_path=default_schema_path())
        logger.info("Schema ready on %s (tables=%d)", backend, len(list_tables(container.conn)))

    app.extensions["attendance_workflow"] = container

    register_error_handlers(app, logger)
    register_attendance(app, container)
    register_schedules(app, container)
    register_reasons(app, container)
    register_approvals(app, container)
    register_notifications(app, container)

    logger.info("App ready (backend=%s, timezone=%s)", backend, container.zone)
    return app

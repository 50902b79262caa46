"""Flask request helpers shared by the JSON controllers.

The identity collaborator stores a verified ``user_id`` and ``role`` in the
signed session; everything here only reads it.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from logging import Logger
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: Role


def current_identity() -> Identity:
    user_id = session.get("user_id")
    role_s = session.get("role")
    if not user_id or not role_s:
        raise AuthenticationError("Authentication required")
    try:
        role = Role(role_s)
    except ValueError:
        raise AuthenticationError("Invalid credentials")
    return Identity(user_id=str(user_id), role=role)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_identity()
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = current_identity()
            if identity.role not in allowed:
                raise AuthorizationError("Access denied")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict, name: str) -> Any:
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} required")
    return value


def parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "1", "yes"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "0", "no"}:
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f"{field_name} must be a boolean")


def parse_int_arg(value: Optional[str], field_name: str, *, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")


def register_error_handlers(app: Flask, logger: Logger) -> None:
    def _error(kind: str, message: str, status: int):
        return jsonify({"error": {"kind": kind, "message": message}}), status

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.http_status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e.message, exc_info=e)
        return _error(e.kind, e.message, e.http_status)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        kind = {400: "validation_error", 401: "unauthorized", 403: "forbidden", 404: "not_found", 409: "conflict"}.get(
            e.code or 500, "http_error"
        )
        return _error(kind, e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error("internal_error", "Internal server error", 500)

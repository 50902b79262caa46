from __future__ import annotations

import dataclasses
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Mapping, Optional

from .datetime_utils import isoformat


def to_json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return isoformat(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value


def to_dict(instance: Any, *, rename: Optional[Mapping[str, str]] = None) -> dict:
    """Serialize a dataclass into a JSON-ready dict (enums as values, ISO-8601 timestamps)."""

    rename = rename or {}
    output = {}
    for f in dataclasses.fields(instance):
        output[rename.get(f.name, f.name)] = to_json_value(getattr(instance, f.name))
    return output

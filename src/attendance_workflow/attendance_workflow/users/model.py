from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account that can act on the workflow.

    Note: A plain data object (no DB access code).
    """

    user_id: str
    username: str
    full_name: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True)
class Student:
    """A student; ``user_id`` links the student to their own account."""

    student_id: str
    name: str
    student_number: str
    user_id: Optional[str] = None


@dataclass(frozen=True)
class ClassInfo:
    class_id: str
    name: str
    code: str
    instructor_id: Optional[str] = None

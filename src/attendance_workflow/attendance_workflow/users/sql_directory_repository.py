from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone, new_id, normalize_bool
from .model import ClassInfo, Student, User
from .repository import DirectoryRepository


def _to_user(r: dict) -> User:
    return User(
        user_id=r["id"],
        username=r["username"],
        full_name=r["full_name"],
        role=Role(r["role"]),
        is_active=normalize_bool(r.get("is_active", True)),
    )


def _to_student(r: dict) -> Student:
    return Student(
        student_id=r["id"],
        name=r["name"],
        student_number=r["student_number"],
        user_id=r.get("user_id"),
    )


class SqlDirectoryRepository(DirectoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_user(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, username, full_name, role, is_active FROM users WHERE id=?",
                (user_id,),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_users_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, username, full_name, role, is_active
                FROM users
                WHERE role=? AND is_active=?
                ORDER BY username
                """,
                (role.value, True),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def get_student(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, student_number, user_id FROM students WHERE id=?", (student_id,))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, code, instructor_id FROM classes WHERE id=?", (class_id,))
            r = fetchone(cur)
            if not r:
                return None
            return ClassInfo(class_id=r["id"], name=r["name"], code=r["code"], instructor_id=r.get("instructor_id"))

    def create_user(self, *, username: str, full_name: str, role: Role) -> str:
        user_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(id, username, full_name, role, is_active, created_at)
                VALUES(?,?,?,?,?,?)
                """,
                (user_id, username, full_name, role.value, True, now_utc()),
            )
        return user_id

    def create_student(self, *, name: str, student_number: str, user_id: Optional[str] = None) -> str:
        student_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students(id, name, student_number, user_id, created_at) VALUES(?,?,?,?,?)",
                (student_id, name, student_number, user_id, now_utc()),
            )
        return student_id

    def create_class(self, *, name: str, code: str, instructor_id: Optional[str] = None) -> str:
        class_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(id, name, code, instructor_id, created_at) VALUES(?,?,?,?,?)",
                (class_id, name, code, instructor_id, now_utc()),
            )
        return class_id

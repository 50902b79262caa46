from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any, Sequence

import mysql.connector
from mysql.connector import errorcode


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection(ABC):
    """Connection factory for one storage backend.

    Note: We create short-lived connections per operation; one connection is
    one transaction. Queries are written once with ``?`` placeholders and
    rewritten here for the backend in use.
    """

    backend = ""
    placeholder = "?"
    integrity_errors: tuple[type[BaseException], ...] = ()
    driver_errors: tuple[type[BaseException], ...] = ()

    @abstractmethod
    def connect(self):
        raise NotImplementedError

    @abstractmethod
    def open_cursor(self, conn):
        raise NotImplementedError

    def sql(self, query: str) -> str:
        if self.placeholder == "?":
            return query
        return query.replace("?", self.placeholder)

    def adapt_param(self, value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def adapt_params(self, params: Sequence[Any]) -> tuple:
        return tuple(self.adapt_param(p) for p in params)

    def is_unique_violation(self, exc: BaseException) -> bool:
        return False


class SQLiteConnection(DatabaseConnection):
    backend = "sqlite"
    placeholder = "?"
    integrity_errors = (sqlite3.IntegrityError,)
    driver_errors = (sqlite3.Error,)

    @staticmethod
    def is_unique_violation(exc: BaseException) -> bool:
        # sqlite3 reports PRIMARY KEY and UNIQUE breaches the same way
        return "UNIQUE constraint failed" in str(exc)

    def __init__(self, path: str | Path):
        self._path = str(path)

    @property
    def path(self) -> str:
        return self._path

    def connect(self):
        conn = sqlite3.connect(self._path, timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def open_cursor(self, conn):
        return conn.cursor()

    def adapt_param(self, value: Any) -> Any:
        value = super().adapt_param(value)
        # sqlite3's implicit date adapters are deprecated; store ISO text.
        if isinstance(value, datetime):
            return value.isoformat(sep=" ", timespec="microseconds")
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, time):
            return value.strftime("%H:%M:%S")
        return value


class MySQLConnection(DatabaseConnection):
    backend = "mysql"
    placeholder = "%s"
    integrity_errors = (mysql.connector.errors.IntegrityError,)
    driver_errors = (mysql.connector.Error,)

    @staticmethod
    def is_unique_violation(exc: BaseException) -> bool:
        return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY

    def __init__(self, config: DBConfig):
        self._config = config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            use_pure=True,
        )

    def open_cursor(self, conn):
        return conn.cursor(dictionary=True)


def build_connection(backend: str, db_config: dict) -> DatabaseConnection:
    """Pick the storage backend once, at process startup."""

    backend = (backend or "sqlite").lower()
    if backend == "sqlite":
        return SQLiteConnection(db_config.get("path", "attendance.db"))
    if backend == "mysql":
        return MySQLConnection(
            DBConfig(
                host=str(db_config.get("host", "localhost")),
                port=int(db_config.get("port", 3306)),
                user=str(db_config.get("user", "root")),
                password=str(db_config.get("password", "")),
                database=str(db_config.get("database", "attendance_db")),
            )
        )
    raise ValueError(f"Unsupported DB_BACKEND: {backend!r}")

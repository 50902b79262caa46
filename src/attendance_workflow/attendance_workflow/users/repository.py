from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import ClassInfo, Student, User


class DirectoryRepository(Protocol):
    """Lookups into the identity and roster collaborators.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_user(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_users_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def get_student(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_class(self, class_id: str) -> Optional[ClassInfo]:
        raise NotImplementedError

    def create_user(self, *, username: str, full_name: str, role: Role) -> str:
        raise NotImplementedError

    def create_student(self, *, name: str, student_number: str, user_id: Optional[str] = None) -> str:
        raise NotImplementedError

    def create_class(self, *, name: str, code: str, instructor_id: Optional[str] = None) -> str:
        raise NotImplementedError

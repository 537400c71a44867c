from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Admin, Teacher


class AdminRepository(Protocol):
    """Repository interface for Admin.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        raise NotImplementedError

    def get_by_identifier(self, identifier: str) -> Optional[Admin]:
        """Look up by email or mobile."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Admin]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, mobile: str, password_hash: str) -> int:
        raise NotImplementedError

    def update(self, admin_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, admin_id: int) -> bool:
        raise NotImplementedError


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_identifier(self, identifier: str) -> Optional[Teacher]:
        """Look up by email or mobile."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, mobile: str, password_hash: str, dept_id: Optional[int]) -> int:
        raise NotImplementedError

    def update(self, teacher_id: int, changes: Mapping[str, Any]) -> bool:
        """Apply a partial update. Keys are column names of the teachers table."""

        raise NotImplementedError

    def delete_by_id(self, teacher_id: int) -> bool:
        """Delete a teacher together with their sessions and attendance."""

        raise NotImplementedError

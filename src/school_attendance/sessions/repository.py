from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: int) -> Optional[ClassSession]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_by_teacher(self, teacher_id: int) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[ClassSession]:
        """Sessions whose enrollment list contains the student."""

        raise NotImplementedError

    def create(self, session: ClassSession) -> int:
        """Insert a session (``session_id`` is ignored) and its enrollment list."""

        raise NotImplementedError

    def update(self, session: ClassSession) -> bool:
        """Overwrite all columns and replace the enrollment list."""

        raise NotImplementedError

    def delete_by_id(self, session_id: int) -> bool:
        """Delete a session; its attendance rows keep a NULL session reference."""

        raise NotImplementedError

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, *, name: str, grade: str) -> int:
        raise NotImplementedError

    def update(self, student_id: int, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        """Delete a student and drop it from every session's enrollment list.

        Returns False when the student did not exist (deleting twice is a no-op).
        """

        raise NotImplementedError

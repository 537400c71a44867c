from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .department_model import Department


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, dept_name: str) -> int:
        raise NotImplementedError

    def update(self, dept_id: int, *, dept_name: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, dept_id: int) -> bool:
        """Delete a department; teachers and sessions keep a NULL reference."""

        raise NotImplementedError

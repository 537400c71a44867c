from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Who is calling: the {userId, role} pair kept in the cookie session."""

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Admin:
    """Domain entity: administrator account.

    Plain data object; ``password_hash`` never leaves the service layer.
    """

    admin_id: int
    name: str
    email: str
    mobile: str
    password_hash: str

    role = Role.ADMIN

    def to_public(self) -> dict:
        return {"id": self.admin_id, "name": self.name, "email": self.email, "mobile": self.mobile}


@dataclass(frozen=True)
class Teacher:
    """Domain entity: teacher account, optionally attached to a department."""

    teacher_id: int
    name: str
    email: str
    mobile: str
    password_hash: str
    dept_id: Optional[int] = None

    role = Role.TEACHER

    def to_public(self) -> dict:
        return {
            "id": self.teacher_id,
            "name": self.name,
            "email": self.email,
            "mobile": self.mobile,
            "departmentId": self.dept_id,
        }

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    optional_id,
    require_email,
    require_min_length,
    require_mobile,
    require_non_empty,
)
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .access import AccessControl
from .department_model import Department
from .department_repository import DepartmentRepository
from .model import Admin, Identity, Teacher
from .repository import AdminRepository, TeacherRepository

logger = logging.getLogger(__name__)

Account = Union[Admin, Teacher]


class AuthService:
    """Use case: log in against the table of the requested role, and whoami."""

    def __init__(self, admins: AdminRepository, teachers: TeacherRepository):
        self._admins = admins
        self._teachers = teachers

    def _lookup(self, role: Role, identifier: str) -> Optional[Account]:
        if role == Role.ADMIN:
            return self._admins.get_by_identifier(identifier)
        if role == Role.TEACHER:
            return self._teachers.get_by_identifier(identifier)
        raise ValidationError("Invalid role")

    def authenticate(self, identifier: str, password: str, role: Union[Role, str]) -> tuple[Identity, dict]:
        if not identifier or not password or not role:
            raise ValidationError("Identifier, password, and role are required")
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")

        account = self._lookup(role, identifier.strip().lower())
        if not account:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        identity = Identity(user_id=_account_id(account), role=role)
        logger.info("login ok role=%s id=%s", role.value, identity.user_id)
        return identity, _with_role(account)

    def whoami(self, identity: Optional[Identity]) -> dict:
        if identity is None:
            raise AuthenticationError("Not authenticated")

        account: Optional[Account]
        if identity.role == Role.ADMIN:
            account = self._admins.get_by_id(identity.user_id)
        elif identity.role == Role.TEACHER:
            account = self._teachers.get_by_id(identity.user_id)
        else:
            raise AuthenticationError("Not authenticated")

        if not account:
            raise NotFoundError("User not found")
        return _with_role(account)


class AdminService:
    """Use case: manage administrator accounts (admin only)."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def list_all(self) -> list[Admin]:
        return list(self._admins.list_all())

    def get(self, admin_id: int) -> Admin:
        admin = self._admins.get_by_id(int(admin_id))
        if not admin:
            raise NotFoundError("Admin not found")
        return admin

    def create(self, *, name: str, email: str, mobile: str, password: str) -> Admin:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        mobile = require_mobile(mobile)
        require_min_length(password, "Password", PASSWORD_MIN_LENGTH)

        if self._admins.get_by_identifier(email) or self._admins.get_by_identifier(mobile):
            raise ConflictError("An admin with this email or mobile already exists")

        admin_id = self._admins.create(
            name=name,
            email=email,
            mobile=mobile,
            password_hash=generate_password_hash(password),
        )
        return self.get(admin_id)

    def update(self, admin_id: int, data: Mapping[str, Any]) -> Admin:
        current = self.get(admin_id)
        changes = _account_changes(data)
        _ensure_identifiers_free(self._admins, changes, current.admin_id, _account_id)
        if changes:
            self._admins.update(current.admin_id, changes)
        return self.get(current.admin_id)

    def delete(self, *, current: Identity, admin_id: int) -> None:
        if current.role == Role.ADMIN and current.user_id == int(admin_id):
            raise ValidationError("You cannot delete your own admin account")

        self.get(admin_id)
        self._admins.delete_by_id(int(admin_id))
        logger.info("admin %s deleted by admin %s", admin_id, current.user_id)


class TeacherService:
    """Use case: manage teacher accounts (admin, or the teacher for their own profile)."""

    def __init__(self, teachers: TeacherRepository, departments: DepartmentRepository, access: AccessControl):
        self._teachers = teachers
        self._departments = departments
        self._access = access

    def list_all(self) -> list[Teacher]:
        return list(self._teachers.list_all())

    def get(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def create(
        self,
        *,
        name: str,
        email: str,
        mobile: str,
        password: str,
        dept_id: Any = None,
    ) -> Teacher:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        mobile = require_mobile(mobile)
        require_min_length(password, "Password", PASSWORD_MIN_LENGTH)
        dept = self._require_department(optional_id(dept_id, "Department"))

        if self._teachers.get_by_identifier(email) or self._teachers.get_by_identifier(mobile):
            raise ConflictError("A teacher with this email or mobile already exists")

        teacher_id = self._teachers.create(
            name=name,
            email=email,
            mobile=mobile,
            password_hash=generate_password_hash(password),
            dept_id=dept,
        )
        return self.get(teacher_id)

    def update(self, *, current: Identity, teacher_id: int, data: Mapping[str, Any]) -> Teacher:
        self._access.require_self_or_admin(current, teacher_id)
        existing = self.get(teacher_id)

        changes = _account_changes(data)
        if "departmentId" in data:
            if not current.is_admin:
                raise ValidationError("Only an admin can change a teacher's department")
            changes["dept_id"] = self._require_department(optional_id(data.get("departmentId"), "Department"))

        _ensure_identifiers_free(self._teachers, changes, existing.teacher_id, _account_id)
        if changes:
            self._teachers.update(existing.teacher_id, changes)
        return self.get(existing.teacher_id)

    def delete(self, *, teacher_id: int) -> None:
        self.get(teacher_id)
        self._teachers.delete_by_id(int(teacher_id))
        logger.info("teacher %s deleted (sessions and attendance cascade)", teacher_id)

    def _require_department(self, dept_id: Optional[int]) -> Optional[int]:
        if dept_id is not None and not self._departments.get_by_id(dept_id):
            raise NotFoundError("Department not found")
        return dept_id


class DepartmentService:
    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list_all(self) -> list[Department]:
        return list(self._departments.list_all())

    def get(self, dept_id: int) -> Department:
        dept = self._departments.get_by_id(int(dept_id))
        if not dept:
            raise NotFoundError("Department not found")
        return dept

    def create(self, *, name: str) -> Department:
        dept_id = self._departments.create(dept_name=require_non_empty(name, "Name"))
        return self.get(dept_id)

    def update(self, dept_id: int, *, name: str) -> Department:
        self.get(dept_id)
        self._departments.update(int(dept_id), dept_name=require_non_empty(name, "Name"))
        return self.get(dept_id)

    def delete(self, dept_id: int) -> None:
        self.get(dept_id)
        self._departments.delete_by_id(int(dept_id))


def _account_id(account: Account) -> int:
    return account.admin_id if isinstance(account, Admin) else account.teacher_id


def _with_role(account: Account) -> dict:
    return {**account.to_public(), "role": account.role.value}


def _account_changes(data: Mapping[str, Any]) -> dict[str, Any]:
    """Validate the shared account fields of a PATCH body into column changes."""
    changes: dict[str, Any] = {}
    if "name" in data:
        changes["name"] = require_non_empty(data.get("name"), "Name")
    if "email" in data:
        changes["email"] = require_email(data.get("email"))
    if "mobile" in data:
        changes["mobile"] = require_mobile(data.get("mobile"))
    if data.get("password"):
        require_min_length(data["password"], "Password", PASSWORD_MIN_LENGTH)
        changes["password_hash"] = generate_password_hash(data["password"])
    return changes


def _ensure_identifiers_free(repo, changes: Mapping[str, Any], own_id: int, id_of) -> None:
    for key in ("email", "mobile"):
        if key in changes:
            other = repo.get_by_identifier(changes[key])
            if other and id_of(other) != own_id:
                raise ConflictError(f"This {key} is already in use")

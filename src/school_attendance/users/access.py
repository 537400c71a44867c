from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import Identity


class AccessControl:
    """Role-gated access decisions for the two fixed roles.

    Every decision matches the role exhaustively so adding a role fails loudly.
    """

    def require_authenticated(self, identity: Optional[Identity]) -> Identity:
        if identity is None:
            raise AuthenticationError("Authentication required")
        return identity

    def require_admin(self, identity: Optional[Identity]) -> Identity:
        identity = self.require_authenticated(identity)
        if identity.role == Role.ADMIN:
            return identity
        if identity.role == Role.TEACHER:
            raise AuthorizationError("Admin access required")
        raise AuthorizationError(f"Unknown role: {identity.role!r}")

    def require_self_or_admin(self, identity: Optional[Identity], teacher_id: int) -> Identity:
        """Admins manage any teacher; a teacher may only manage their own profile."""
        identity = self.require_authenticated(identity)
        if identity.role == Role.ADMIN:
            return identity
        if identity.role == Role.TEACHER:
            if identity.user_id != int(teacher_id):
                raise AuthorizationError("You can only change your own profile")
            return identity
        raise AuthorizationError(f"Unknown role: {identity.role!r}")

    def can_manage_session(self, identity: Identity, owner_teacher_id: Optional[int]) -> bool:
        if identity.role == Role.ADMIN:
            return True
        if identity.role == Role.TEACHER:
            return owner_teacher_id is not None and identity.user_id == int(owner_teacher_id)
        return False

    def scoped_teacher_id(self, identity: Identity) -> Optional[int]:
        """Teacher filter applied inside list reads: None means no restriction."""
        if identity.role == Role.ADMIN:
            return None
        if identity.role == Role.TEACHER:
            return identity.user_id
        raise AuthorizationError(f"Unknown role: {identity.role!r}")

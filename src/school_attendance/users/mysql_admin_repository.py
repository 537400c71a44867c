from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Admin
from .repository import AdminRepository

_COLUMNS = "admin_id, name, email, mobile, password_hash"
_UPDATABLE = ("name", "email", "mobile", "password_hash")


def _to_admin(row: dict) -> Admin:
    return Admin(
        admin_id=int(row["admin_id"]),
        name=row["name"],
        email=row["email"],
        mobile=row["mobile"],
        password_hash=row["password_hash"],
    )


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM admins WHERE admin_id=%s", (admin_id,))
            row = fetchone(cur)
            return _to_admin(row) if row else None

    def get_by_identifier(self, identifier: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM admins WHERE email=%s OR mobile=%s LIMIT 1",
                (identifier, identifier),
            )
            row = fetchone(cur)
            return _to_admin(row) if row else None

    def list_all(self) -> Sequence[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM admins ORDER BY name")
            return [_to_admin(r) for r in fetchall(cur)]

    def create(self, *, name: str, email: str, mobile: str, password_hash: str) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO admins(name, email, mobile, password_hash) VALUES(%s,%s,%s,%s)",
                    (name, email, mobile, password_hash),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("An admin with this email or mobile already exists") from e
            raise

    def update(self, admin_id: int, changes: Mapping[str, Any]) -> bool:
        cols = [c for c in _UPDATABLE if c in changes]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        params = tuple(changes[c] for c in cols) + (int(admin_id),)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE admins SET {assignments} WHERE admin_id=%s", params)
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("This email or mobile is already in use") from e
            raise

    def delete_by_id(self, admin_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM admins WHERE admin_id=%s", (admin_id,))
            return cur.rowcount > 0

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Teacher
from .repository import TeacherRepository

_COLUMNS = "teacher_id, name, email, mobile, password_hash, dept_id"
_UPDATABLE = ("name", "email", "mobile", "password_hash", "dept_id")


def _to_teacher(row: dict) -> Teacher:
    return Teacher(
        teacher_id=int(row["teacher_id"]),
        name=row["name"],
        email=row["email"],
        mobile=row["mobile"],
        password_hash=row["password_hash"],
        dept_id=int(row["dept_id"]) if row.get("dept_id") is not None else None,
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers WHERE teacher_id=%s", (teacher_id,))
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def get_by_identifier(self, identifier: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM teachers WHERE email=%s OR mobile=%s LIMIT 1",
                (identifier, identifier),
            )
            row = fetchone(cur)
            return _to_teacher(row) if row else None

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM teachers ORDER BY name")
            return [_to_teacher(r) for r in fetchall(cur)]

    def create(self, *, name: str, email: str, mobile: str, password_hash: str, dept_id: Optional[int]) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO teachers(name, email, mobile, password_hash, dept_id)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (name, email, mobile, password_hash, dept_id),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("A teacher with this email or mobile already exists") from e
            raise

    def update(self, teacher_id: int, changes: Mapping[str, Any]) -> bool:
        cols = [c for c in _UPDATABLE if c in changes]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        params = tuple(changes[c] for c in cols) + (int(teacher_id),)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE teachers SET {assignments} WHERE teacher_id=%s", params)
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ConflictError("This email or mobile is already in use") from e
            raise

    def delete_by_id(self, teacher_id: int) -> bool:
        # sessions.teacher_id and attendance_records.teacher_id are ON DELETE CASCADE
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teachers WHERE teacher_id=%s", (teacher_id,))
            return cur.rowcount > 0

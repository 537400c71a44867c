from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_UPDATABLE = ("name", "grade")


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id, name, grade FROM students WHERE student_id=%s", (student_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Student(student_id=int(r["student_id"]), name=r["name"], grade=r["grade"])

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id, name, grade FROM students ORDER BY name")
            return [
                Student(student_id=int(r["student_id"]), name=r["name"], grade=r["grade"])
                for r in fetchall(cur)
            ]

    def create(self, *, name: str, grade: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO students(name, grade) VALUES(%s,%s)", (name, grade))
            return int(cur.lastrowid)

    def update(self, student_id: int, changes: Mapping[str, Any]) -> bool:
        cols = [c for c in _UPDATABLE if c in changes]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE students SET {assignments} WHERE student_id=%s",
                tuple(changes[c] for c in cols) + (int(student_id),),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        # Enrollment rows go first in the same transaction; attendance snapshots stay as recorded.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM session_students WHERE student_id=%s", (student_id,))
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0

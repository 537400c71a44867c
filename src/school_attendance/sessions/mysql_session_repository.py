from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import ClassSession
from .repository import SessionRepository

_SELECT = """
    SELECT session_id, name, teacher_id, dept_id, start_date, end_date, start_time, end_time
    FROM sessions
"""


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _query(self, where: str = "", params: tuple = ()) -> list[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY name, session_id", params)
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["session_id"]) for r in rows]
            placeholders = ",".join(["%s"] * len(ids))
            cur.execute(
                f"""
                SELECT session_id, student_id
                FROM session_students
                WHERE session_id IN ({placeholders})
                ORDER BY session_id, position
                """,
                tuple(ids),
            )
            enrolled: dict[int, list[int]] = defaultdict(list)
            for e in fetchall(cur):
                enrolled[int(e["session_id"])].append(int(e["student_id"]))

            return [
                ClassSession(
                    session_id=int(r["session_id"]),
                    name=r["name"],
                    teacher_id=int(r["teacher_id"]),
                    dept_id=int(r["dept_id"]) if r.get("dept_id") is not None else None,
                    start_date=r["start_date"],
                    end_date=r["end_date"],
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    student_ids=tuple(enrolled.get(int(r["session_id"]), [])),
                )
                for r in rows
            ]

    def get_by_id(self, session_id: int) -> Optional[ClassSession]:
        found = self._query("WHERE session_id=%s", (int(session_id),))
        return found[0] if found else None

    def list_all(self) -> Sequence[ClassSession]:
        return self._query()

    def list_by_teacher(self, teacher_id: int) -> Sequence[ClassSession]:
        return self._query("WHERE teacher_id=%s", (int(teacher_id),))

    def list_for_student(self, student_id: int) -> Sequence[ClassSession]:
        return self._query(
            "WHERE session_id IN (SELECT session_id FROM session_students WHERE student_id=%s)",
            (int(student_id),),
        )

    def create(self, session: ClassSession) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sessions(name, teacher_id, dept_id, start_date, end_date, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    session.name,
                    session.teacher_id,
                    session.dept_id,
                    session.start_date,
                    session.end_date,
                    session.start_time,
                    session.end_time,
                ),
            )
            session_id = int(cur.lastrowid)
            self._write_enrollment(cur, session_id, session.student_ids)
            return session_id

    def update(self, session: ClassSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sessions
                SET name=%s, teacher_id=%s, dept_id=%s, start_date=%s, end_date=%s, start_time=%s, end_time=%s
                WHERE session_id=%s
                """,
                (
                    session.name,
                    session.teacher_id,
                    session.dept_id,
                    session.start_date,
                    session.end_date,
                    session.start_time,
                    session.end_time,
                    session.session_id,
                ),
            )
            cur.execute("DELETE FROM session_students WHERE session_id=%s", (session.session_id,))
            self._write_enrollment(cur, session.session_id, session.student_ids)
            return True

    def delete_by_id(self, session_id: int) -> bool:
        # session_students cascades; attendance_records.session_id is ON DELETE SET NULL
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE session_id=%s", (int(session_id),))
            return cur.rowcount > 0

    @staticmethod
    def _write_enrollment(cur, session_id: int, student_ids: Sequence[int]) -> None:
        if not student_ids:
            return
        cur.executemany(
            "INSERT INTO session_students(session_id, student_id, position) VALUES(%s,%s,%s)",
            [(session_id, int(sid), pos) for pos, sid in enumerate(student_ids)],
        )

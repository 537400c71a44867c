from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.constants import DUPLICATE_ATTENDANCE_MESSAGE
from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_ids, fetchall, fetchone, is_duplicate_key, load_ids
from .model import AttendanceFilters, AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, work_date, session_id, teacher_id, present_student_ids,
           actual_start_time, actual_end_time, duration_hours
    FROM attendance_records
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        work_date=r["work_date"],
        session_id=int(r["session_id"]) if r.get("session_id") is not None else None,
        teacher_id=int(r["teacher_id"]),
        present_student_ids=tuple(load_ids(r.get("present_student_ids"))),
        duration_hours=float(r["duration_hours"]),
        actual_start_time=r.get("actual_start_time"),
        actual_end_time=r.get("actual_end_time"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_session_and_date(self, session_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE session_id=%s AND work_date=%s", (int(session_id), work_date))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_by_filters(self, filters: AttendanceFilters) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if filters.start_date is not None:
            clauses.append("work_date >= %s")
            params.append(filters.start_date)
        if filters.end_date is not None:
            clauses.append("work_date <= %s")
            params.append(filters.end_date)
        if filters.teacher_id is not None:
            clauses.append("teacher_id=%s")
            params.append(int(filters.teacher_id))
        if filters.session_id is not None:
            clauses.append("session_id=%s")
            params.append(int(filters.session_id))
        if filters.student_id is not None:
            clauses.append("JSON_CONTAINS(present_student_ids, %s)")
            params.append(str(int(filters.student_id)))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY work_date DESC, attendance_id DESC", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, record: AttendanceRecord) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        work_date, session_id, teacher_id, present_student_ids,
                        actual_start_time, actual_end_time, duration_hours
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.work_date,
                        record.session_id,
                        record.teacher_id,
                        dump_ids(list(record.present_student_ids)),
                        record.actual_start_time,
                        record.actual_end_time,
                        record.duration_hours,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            # uq_attendance_session_date closes the check-then-insert race
            if is_duplicate_key(e):
                raise DuplicateAttendanceError(DUPLICATE_ATTENDANCE_MESSAGE) from e
            raise

    def update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET present_student_ids=%s, actual_start_time=%s, actual_end_time=%s, duration_hours=%s
                WHERE attendance_id=%s
                """,
                (
                    dump_ids(list(record.present_student_ids)),
                    record.actual_start_time,
                    record.actual_end_time,
                    record.duration_hours,
                    record.attendance_id,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

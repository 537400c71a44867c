from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceFilters, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_session_and_date(self, session_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_by_filters(self, filters: AttendanceFilters) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> int:
        """Insert a record (``attendance_id`` is ignored) and return the new id.

        Must raise DuplicateAttendanceError when (session_id, work_date) already
        exists, even if a concurrent writer got there after the service check.
        """

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

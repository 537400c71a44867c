from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from ..core.constants import DUPLICATE_ATTENDANCE_MESSAGE, OUT_OF_RANGE_MESSAGE
from ..core.exceptions import (
    AuthorizationError,
    DuplicateAttendanceError,
    InvalidDateRangeError,
    NotFoundError,
    ValidationError,
)
from ..sessions.model import ClassSession
from ..sessions.repository import SessionRepository
from ..users.access import AccessControl
from ..users.model import Identity
from .factory import AttendanceDurationFactory
from .model import AttendanceFilters, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_UNSET = object()


class AttendanceService:
    """Use case: mark, edit, list and delete roll calls.

    ``mark`` is the write gatekeeper: uniqueness, session existence and the
    session's active date range are checked in that order before anything is
    written. The repository's unique key backs up the uniqueness check.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        access: AccessControl,
        *,
        duration_factory: AttendanceDurationFactory | None = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._access = access
        self._factory = duration_factory or AttendanceDurationFactory()

    def mark(
        self,
        *,
        current: Identity,
        work_date: date,
        session_id: int,
        present_student_ids: Iterable[int] = (),
        actual_start_time: Optional[datetime] = None,
        actual_end_time: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if self._attendance.get_for_session_and_date(int(session_id), work_date):
            logger.info("duplicate attendance rejected session=%s date=%s", session_id, work_date)
            raise DuplicateAttendanceError(DUPLICATE_ATTENDANCE_MESSAGE)

        session = self._sessions.get_by_id(int(session_id))
        if not session:
            raise NotFoundError("Session not found")

        if not session.is_active_on(work_date):
            raise InvalidDateRangeError(OUT_OF_RANGE_MESSAGE)

        if not self._access.can_manage_session(current, session.teacher_id):
            raise AuthorizationError("You can only mark attendance for your own sessions")

        present = self._check_roster(session, present_student_ids)
        _check_window(work_date, actual_start_time, actual_end_time)
        duration = self._duration(session, actual_start_time, actual_end_time)

        record = AttendanceRecord(
            attendance_id=0,
            work_date=work_date,
            session_id=session.session_id,
            teacher_id=session.teacher_id,
            present_student_ids=present,
            duration_hours=duration,
            actual_start_time=actual_start_time,
            actual_end_time=actual_end_time,
        )
        attendance_id = self._attendance.create(record)
        logger.info(
            "attendance %s marked session=%s date=%s present=%d/%d hours=%s",
            attendance_id,
            session.session_id,
            work_date,
            len(present),
            len(session.student_ids),
            duration,
        )
        return dataclasses.replace(record, attendance_id=attendance_id)

    def update(
        self,
        *,
        current: Identity,
        attendance_id: int,
        present_student_ids: Optional[Iterable[int]] = None,
        actual_start_time=_UNSET,
        actual_end_time=_UNSET,
    ) -> AttendanceRecord:
        """Edit a roll call. Omitted fields keep their value; the duration is recomputed."""
        record = self.get(attendance_id)
        if not self._access.can_manage_session(current, record.teacher_id):
            raise AuthorizationError("You can only edit attendance for your own sessions")

        if record.session_id is None:
            raise ValidationError("The session of this attendance record was deleted")
        session = self._sessions.get_by_id(record.session_id)
        if not session:
            raise NotFoundError("Session not found")

        present = record.present_student_ids
        if present_student_ids is not None:
            present = self._check_roster(session, present_student_ids)

        start = record.actual_start_time if actual_start_time is _UNSET else actual_start_time
        end = record.actual_end_time if actual_end_time is _UNSET else actual_end_time
        _check_window(record.work_date, start, end)

        updated = dataclasses.replace(
            record,
            present_student_ids=present,
            actual_start_time=start,
            actual_end_time=end,
            duration_hours=self._duration(session, start, end),
        )
        self._attendance.update(updated)
        return updated

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def list_records(self, *, current: Identity, filters: AttendanceFilters) -> list[AttendanceRecord]:
        """Filtered listing; a teacher only ever sees their own roll calls."""
        own = self._access.scoped_teacher_id(current)
        if own is not None:
            if filters.teacher_id is not None and filters.teacher_id != own:
                return []
            filters = dataclasses.replace(filters, teacher_id=own)
        return list(self._attendance.list_by_filters(filters))

    def delete(self, attendance_id: int) -> None:
        self.get(attendance_id)
        self._attendance.delete_by_id(int(attendance_id))

    def _check_roster(self, session: ClassSession, student_ids: Iterable[int]) -> tuple[int, ...]:
        present: list[int] = []
        for sid in student_ids:
            sid = int(sid)
            if not session.is_enrolled(sid):
                raise ValidationError(f"Student {sid} is not enrolled in this session")
            if sid not in present:
                present.append(sid)
        return tuple(present)

    def _duration(self, session: ClassSession, start: Optional[datetime], end: Optional[datetime]) -> float:
        strategy = self._factory.for_times(actual_start=start, actual_end=end)
        return strategy.duration_hours(session=session, actual_start=start, actual_end=end)


def _check_window(work_date: date, start: Optional[datetime], end: Optional[datetime]) -> None:
    """Recorded times start on the attendance date; overnight classes may end the next day."""
    if start is not None and start.date() != work_date:
        raise ValidationError("Actual start time must be on the attendance date")
    if end is not None and end.date() not in (work_date, work_date + timedelta(days=1)):
        raise ValidationError("Actual end time must be on the attendance date or the day after")

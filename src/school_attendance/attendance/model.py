from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one day's roll call for one session.

    A point-in-time snapshot: later roster changes on the session do not touch it.
    ``session_id`` becomes None once the session is deleted.
    """

    attendance_id: int
    work_date: date
    session_id: Optional[int]
    teacher_id: int
    present_student_ids: tuple[int, ...] = field(default_factory=tuple)
    duration_hours: float = 0.0
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None

    def is_present(self, student_id: int) -> bool:
        return int(student_id) in self.present_student_ids

    def to_public(self) -> dict:
        return {
            "id": self.attendance_id,
            "date": self.work_date.isoformat(),
            "sessionId": self.session_id,
            "teacherId": self.teacher_id,
            "presentStudentIds": list(self.present_student_ids),
            "actualStartTime": self.actual_start_time.isoformat() if self.actual_start_time else None,
            "actualEndTime": self.actual_end_time.isoformat() if self.actual_end_time else None,
            "durationHours": self.duration_hours,
        }


@dataclass(frozen=True)
class AttendanceFilters:
    """Optional filters; every supplied one must match (date bounds inclusive)."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    teacher_id: Optional[int] = None
    session_id: Optional[int] = None
    student_id: Optional[int] = None

    def matches(self, record: AttendanceRecord) -> bool:
        if self.start_date is not None and record.work_date < self.start_date:
            return False
        if self.end_date is not None and record.work_date > self.end_date:
            return False
        if self.teacher_id is not None and record.teacher_id != self.teacher_id:
            return False
        if self.session_id is not None and record.session_id != self.session_id:
            return False
        if self.student_id is not None and not record.is_present(self.student_id):
            return False
        return True

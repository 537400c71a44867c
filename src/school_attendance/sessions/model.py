from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_hhmm, fractional_hours


@dataclass(frozen=True)
class ClassSession:
    """Domain entity: a recurring class (not a login session).

    Active on every date in [start_date, end_date], held daily between
    start_time and end_time. ``student_ids`` keeps enrollment order.
    """

    session_id: int
    name: str
    teacher_id: int
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    student_ids: tuple[int, ...] = field(default_factory=tuple)
    dept_id: Optional[int] = None

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def is_enrolled(self, student_id: int) -> bool:
        return int(student_id) in self.student_ids

    @property
    def scheduled_hours(self) -> float:
        return fractional_hours(self.end_time) - fractional_hours(self.start_time)

    def to_public(self) -> dict:
        return {
            "id": self.session_id,
            "name": self.name,
            "teacherId": self.teacher_id,
            "departmentId": self.dept_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "startTime": format_hhmm(self.start_time),
            "endTime": format_hhmm(self.end_time),
            "studentIds": list(self.student_ids),
        }

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceFilters

# Reports accept the same optional filter set as the attendance listing.
ReportFilters = AttendanceFilters


def attendance_rate(present: int, total: int) -> Optional[float]:
    """present / total as a percentage; None means no class was held ("no data")."""
    if total <= 0:
        return None
    return present / total * 100


@dataclass(frozen=True)
class StudentAttendanceRow:
    student_id: int
    student_name: str
    present: int
    total: int

    @property
    def rate(self) -> Optional[float]:
        return attendance_rate(self.present, self.total)

    def to_public(self) -> dict:
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "present": self.present,
            "total": self.total,
        }


@dataclass(frozen=True)
class TeacherHoursRow:
    teacher_id: int
    teacher_name: str
    hours: float

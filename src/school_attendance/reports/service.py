from __future__ import annotations

import dataclasses
from collections import defaultdict
from typing import Sequence

from ..attendance.repository import AttendanceRepository
from ..core.exceptions import NotFoundError
from ..sessions.model import ClassSession
from ..sessions.repository import SessionRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.repository import TeacherRepository
from .model import ReportFilters, StudentAttendanceRow, TeacherHoursRow


class ReportService:
    """Derived views over attendance history: teacher work-hours and student attendance."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        students: StudentRepository,
        teachers: TeacherRepository,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._students = students
        self._teachers = teachers

    def teacher_work_hours(self, filters: ReportFilters) -> dict[int, float]:
        """Sum of duration_hours per teacher over the matching records.

        Teachers without matching records are absent from the result (treat as 0).
        """
        totals: dict[int, float] = defaultdict(float)
        for record in self._attendance.list_by_filters(filters):
            totals[record.teacher_id] += record.duration_hours
        return dict(totals)

    def teacher_work_hours_rows(self, filters: ReportFilters) -> list[TeacherHoursRow]:
        """Hours joined with teacher names for exports; every listed teacher gets a row."""
        totals = self.teacher_work_hours(filters)
        teachers = self._teachers.list_all()
        if filters.teacher_id is not None:
            teachers = [t for t in teachers if t.teacher_id == filters.teacher_id]

        rows = [
            TeacherHoursRow(teacher_id=t.teacher_id, teacher_name=t.name, hours=totals.get(t.teacher_id, 0.0))
            for t in teachers
        ]
        rows.sort(key=lambda r: r.teacher_name.lower())
        return rows

    def student_attendance(self, filters: ReportFilters) -> list[StudentAttendanceRow]:
        """Per student: classes held in the window for sessions they are enrolled in (total),
        and how many of those marked them present (present).
        """
        students: Sequence[Student]
        sessions: Sequence[ClassSession]
        if filters.student_id is not None:
            student = self._students.get_by_id(filters.student_id)
            if not student:
                raise NotFoundError("Student not found")
            students = [student]
            sessions = self._sessions.list_for_student(student.student_id)
        else:
            students = self._students.list_all()
            sessions = self._sessions.list_all()

        enrolled_sessions: dict[int, set[int]] = defaultdict(set)
        for s in sessions:
            for sid in s.student_ids:
                enrolled_sessions[sid].add(s.session_id)

        # Held classes are selected without the "present" filter, otherwise total == present.
        held = self._attendance.list_by_filters(dataclasses.replace(filters, student_id=None))

        rows: list[StudentAttendanceRow] = []
        for student in students:
            session_ids = enrolled_sessions.get(student.student_id, set())
            relevant = [r for r in held if r.session_id is not None and r.session_id in session_ids]
            present = sum(1 for r in relevant if r.is_present(student.student_id))
            rows.append(
                StudentAttendanceRow(
                    student_id=student.student_id,
                    student_name=student.name,
                    present=present,
                    total=len(relevant),
                )
            )

        rows.sort(key=lambda r: r.student_name.lower())
        return rows

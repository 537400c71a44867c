from __future__ import annotations

import dataclasses
import logging
from datetime import date, time
from typing import Any, Iterable, Mapping, Optional

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from ..users.access import AccessControl
from ..users.department_repository import DepartmentRepository
from ..users.model import Identity
from ..users.repository import TeacherRepository
from .model import ClassSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)

_EDITABLE = {"name", "teacher_id", "dept_id", "start_date", "end_date", "start_time", "end_time", "student_ids"}


class SessionService:
    """Use case: manage class sessions (admin) and list them (scoped by role)."""

    def __init__(
        self,
        sessions: SessionRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
        departments: DepartmentRepository,
        access: AccessControl,
    ):
        self._sessions = sessions
        self._teachers = teachers
        self._students = students
        self._departments = departments
        self._access = access

    def list_for(self, identity: Identity) -> list[ClassSession]:
        """Teachers see only the sessions they own; admins see all of them."""
        teacher_id = self._access.scoped_teacher_id(identity)
        if teacher_id is None:
            return list(self._sessions.list_all())
        return list(self._sessions.list_by_teacher(teacher_id))

    def list_by_teacher(self, teacher_id: int) -> list[ClassSession]:
        return list(self._sessions.list_by_teacher(int(teacher_id)))

    def get(self, session_id: int) -> ClassSession:
        session = self._sessions.get_by_id(int(session_id))
        if not session:
            raise NotFoundError("Session not found")
        return session

    def create(
        self,
        *,
        name: str,
        teacher_id: int,
        start_date: date,
        end_date: date,
        start_time: time,
        end_time: time,
        student_ids: Iterable[int] = (),
        dept_id: Optional[int] = None,
    ) -> ClassSession:
        candidate = ClassSession(
            session_id=0,
            name=name,
            teacher_id=int(teacher_id),
            dept_id=dept_id,
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
            student_ids=tuple(student_ids),
        )
        candidate = self._validated(candidate)
        session_id = self._sessions.create(candidate)
        logger.info("session %s '%s' created for teacher %s", session_id, candidate.name, candidate.teacher_id)
        return self.get(session_id)

    def update(self, session_id: int, changes: Mapping[str, Any]) -> ClassSession:
        current = self.get(session_id)
        unknown = set(changes) - _EDITABLE
        if unknown:
            raise ValidationError(f"Unknown session fields: {', '.join(sorted(unknown))}")

        fields = dict(changes)
        if "student_ids" in fields:
            fields["student_ids"] = tuple(fields["student_ids"])
        merged = self._validated(dataclasses.replace(current, **fields))
        self._sessions.update(merged)
        return self.get(session_id)

    def delete(self, session_id: int) -> None:
        self.get(session_id)
        self._sessions.delete_by_id(int(session_id))
        logger.info("session %s deleted; its attendance keeps a null session reference", session_id)

    def _validated(self, s: ClassSession) -> ClassSession:
        name = require_non_empty(s.name, "Name")
        if s.start_date > s.end_date:
            raise ValidationError("Start date must be on or before end date")
        if s.start_time >= s.end_time:
            raise ValidationError("Start time must be before end time")
        if not self._teachers.get_by_id(s.teacher_id):
            raise NotFoundError("Teacher not found")
        if s.dept_id is not None and not self._departments.get_by_id(s.dept_id):
            raise NotFoundError("Department not found")

        student_ids: list[int] = []
        for sid in s.student_ids:
            if int(sid) in student_ids:
                continue
            if not self._students.get_by_id(int(sid)):
                raise NotFoundError(f"Student {sid} not found")
            student_ids.append(int(sid))

        return dataclasses.replace(s, name=name, student_ids=tuple(student_ids))

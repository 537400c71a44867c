from __future__ import annotations

import logging
from typing import Any, Mapping

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    def __init__(self, students: StudentRepository):
        self._students = students

    def list_all(self) -> list[Student]:
        return list(self._students.list_all())

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create(self, *, name: str, grade: str) -> Student:
        student_id = self._students.create(
            name=require_non_empty(name, "Name"),
            grade=require_non_empty(grade, "Grade"),
        )
        return self.get(student_id)

    def update(self, student_id: int, data: Mapping[str, Any]) -> Student:
        self.get(student_id)
        changes = {}
        if "name" in data:
            changes["name"] = require_non_empty(data.get("name"), "Name")
        if "grade" in data:
            changes["grade"] = require_non_empty(data.get("grade"), "Grade")
        if changes:
            self._students.update(int(student_id), changes)
        return self.get(student_id)

    def delete(self, student_id: int) -> bool:
        """Idempotent: returns False when there was nothing to delete."""
        deleted = self._students.delete_by_id(int(student_id))
        if deleted:
            logger.info("student %s deleted and unenrolled from all sessions", student_id)
        return deleted

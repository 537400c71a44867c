from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a student. Students have no login identity."""

    student_id: int
    name: str
    grade: str

    def to_public(self) -> dict:
        return {"id": self.student_id, "name": self.name, "grade": self.grade}

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...sessions.model import ClassSession


class DurationStrategy(ABC):
    """Strategy Pattern: encapsulate how a roll call's duration in hours is decided."""

    @abstractmethod
    def duration_hours(
        self,
        *,
        session: ClassSession,
        actual_start: Optional[datetime],
        actual_end: Optional[datetime],
    ) -> float:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError
from .strategies.actual_strategy import ActualWindowStrategy
from .strategies.base import DurationStrategy
from .strategies.scheduled_strategy import ScheduledWindowStrategy


@dataclass
class AttendanceDurationFactory:
    """Factory Pattern: recorded times win over the session schedule."""

    def for_times(self, *, actual_start: Optional[datetime], actual_end: Optional[datetime]) -> DurationStrategy:
        if actual_start is None and actual_end is None:
            return ScheduledWindowStrategy()
        if actual_start is None or actual_end is None:
            raise ValidationError("Actual start and end time must be given together")
        return ActualWindowStrategy()

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.constants import DURATION_DECIMALS
from ...core.exceptions import ValidationError
from ...sessions.model import ClassSession
from .base import DurationStrategy


class ActualWindowStrategy(DurationStrategy):
    """Duration from the recorded start/end timestamps, rounded for display."""

    def duration_hours(
        self,
        *,
        session: ClassSession,
        actual_start: Optional[datetime],
        actual_end: Optional[datetime],
    ) -> float:
        if actual_start is None or actual_end is None:
            raise ValidationError("Actual start and end time are both required")
        if actual_end < actual_start:
            raise ValidationError("Actual end time must not be before actual start time")
        hours = (actual_end - actual_start).total_seconds() / 3600
        return round(hours, DURATION_DECIMALS)

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...sessions.model import ClassSession
from .base import DurationStrategy


class ScheduledWindowStrategy(DurationStrategy):
    """Duration from the session's daily time window: (endH + endM/60) - (startH + startM/60)."""

    def duration_hours(
        self,
        *,
        session: ClassSession,
        actual_start: Optional[datetime],
        actual_end: Optional[datetime],
    ) -> float:
        return max(session.scheduled_hours, 0.0)

from datetime import date, datetime, time

import pytest

from school_attendance.attendance.factory import AttendanceDurationFactory
from school_attendance.attendance.strategies.actual_strategy import ActualWindowStrategy
from school_attendance.attendance.strategies.scheduled_strategy import ScheduledWindowStrategy
from school_attendance.core.exceptions import ValidationError
from school_attendance.sessions.model import ClassSession


def _session(start: time, end: time) -> ClassSession:
    return ClassSession(
        session_id=1,
        name="Algebra 101",
        teacher_id=1,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        start_time=start,
        end_time=end,
    )


def test_factory_without_actual_times_uses_schedule():
    strategy = AttendanceDurationFactory().for_times(actual_start=None, actual_end=None)
    assert isinstance(strategy, ScheduledWindowStrategy)


def test_factory_with_both_actual_times_uses_them():
    strategy = AttendanceDurationFactory().for_times(
        actual_start=datetime(2024, 1, 2, 9, 0), actual_end=datetime(2024, 1, 2, 10, 0)
    )
    assert isinstance(strategy, ActualWindowStrategy)


def test_factory_rejects_half_a_window():
    with pytest.raises(ValidationError):
        AttendanceDurationFactory().for_times(actual_start=None, actual_end=datetime(2024, 1, 2, 10, 0))


def test_scheduled_hours_use_fractional_minutes():
    session = _session(time(9, 15), time(10, 45))
    hours = ScheduledWindowStrategy().duration_hours(session=session, actual_start=None, actual_end=None)
    assert hours == 1.5


def test_actual_window_rounds_to_two_decimals():
    hours = ActualWindowStrategy().duration_hours(
        session=_session(time(9, 0), time(10, 0)),
        actual_start=datetime(2024, 1, 2, 9, 0, 0),
        actual_end=datetime(2024, 1, 2, 9, 20, 0),
    )
    assert hours == 0.33


def test_actual_window_rejects_end_before_start():
    with pytest.raises(ValidationError):
        ActualWindowStrategy().duration_hours(
            session=_session(time(9, 0), time(10, 0)),
            actual_start=datetime(2024, 1, 2, 10, 0),
            actual_end=datetime(2024, 1, 2, 9, 0),
        )

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role. Fixed at login and carried for the whole cookie session."""

    ADMIN = "admin"
    TEACHER = "teacher"

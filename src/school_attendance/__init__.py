"""School attendance and teacher work-hours tracking.

Organized by feature modules (users, students, sessions, attendance,
reports), each with a thin Flask controller over service/repository layers.
"""
from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]

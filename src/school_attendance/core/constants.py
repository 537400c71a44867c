"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_LIFETIME_DAYS = 7
MOBILE_MAX_LENGTH = 8
PASSWORD_MIN_LENGTH = 6
DURATION_DECIMALS = 2

DUPLICATE_ATTENDANCE_MESSAGE = "Attendance already marked for this session on this date"
OUT_OF_RANGE_MESSAGE = "Cannot mark attendance outside session date range"

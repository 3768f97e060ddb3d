"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_ACCESS_TOKEN_MINUTES = 15
DEFAULT_ATTENDANCE_WARNING_THRESHOLD = 75.0
DEFAULT_NOTIFICATION_LIMIT = 50
MIN_PASSWORD_LENGTH = 8

REASON_MISSING_FIELD = "missing field"
REASON_NOT_ENROLLED = "not enrolled or name mismatch"
REASON_INVALID_STATUS = "invalid status"
REASON_INVALID_GRADE = "invalid grade"

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MAX_DAILY_HOURS = 8
DEFAULT_MAX_WEEKLY_HOURS = 40
DEFAULT_STANDARD_DAILY_HOURS = 8
DEFAULT_BREAK_DURATION_MINUTES = 30
DEFAULT_MINIMUM_BREAK_THRESHOLD_HOURS = 6
DEFAULT_ROUNDING_MINUTES = 15
DEFAULT_ROUNDING_METHOD = "nearest"
DEFAULT_PROJECT_CODE = "INTERNAL"
DEFAULT_ANNUAL_LEAVE_BALANCE = 30
DEFAULT_MIN_LEAVE_BALANCE = 0
DEFAULT_MAX_LEAVE_BALANCE = 30
DEFAULT_TIMEZONE = "Europe/Berlin"
DEFAULT_LEAVE_TYPES = ("VACATION", "SICK", "SPECIAL")
DEFAULT_LEAVE_DAY_COUNTING = "calendar"

DEFAULT_HISTORY_LIMIT = 200
MINUTES_PER_HOUR = 60

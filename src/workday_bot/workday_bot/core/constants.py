"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_WORKING_DAYS = 1
MAX_WORKING_DAYS = 365

MAX_SET_BALANCE_DAYS = 365
MAX_ADJUST_DAYS = 100

DEFAULT_TIME_LOG_DAYS = 7
MAX_TIME_LOG_DAYS = 30

MIN_REMIND_MINUTES = 1
MAX_REMIND_MINUTES = 1440

RECENT_REQUESTS_LIMIT = 10
OFF_DUTY_WINDOW_HOURS = 24
OFF_DUTY_LIMIT = 10
VACATION_CALENDAR_LIMIT = 10

DEFAULT_REPORT_DAYS = 7
DEFAULT_PRODUCTIVITY_DAYS = 30
WEEK_DAYS = 7
MAX_REPORT_DAYS = 365
MIN_REPORT_YEAR = 2000
MAX_REPORT_YEAR = 2100

"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_RECENT_LOGS_LIMIT = 20
DEFAULT_LOGS_PAGE_SIZE = 100
DEFAULT_MEMBERS_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000

DEFAULT_REPORT_TIMEZONE = "Asia/Manila"
# 12:00 every Monday
DEFAULT_REPORT_CRON = "0 12 * * mon"

PREVIOUS_WEEK = "previous_week"

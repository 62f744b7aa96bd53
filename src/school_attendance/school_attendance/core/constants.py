"""Constants and defaults.

Note: Keep constants here to avoid magic values spread across code.
"""

YEAR_LEVELS = ("Year 7", "Year 8", "Year 9", "Year 10", "Year 11", "Year 12")
ALL = "All"

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
TERMS = ("1st Term", "2nd Term", "3rd Term", "Full Session")
THEMES = ("light", "dark")
TIMEZONES = (
    "UTC",
    "America/New_York",
    "America/Los_Angeles",
    "Europe/London",
    "Europe/Paris",
    "Asia/Tokyo",
    "Australia/Sydney",
)

DEFAULT_REPORT_DAYS = 30
DEFAULT_SCHOOL_YEAR = "2024-2025"
DEFAULT_YEAR_LEVEL = "Year 7"
DEFAULT_TERM = "1st Term"
DEFAULT_REMINDER_TIME = "09:00"
DEFAULT_THEME = "light"
DEFAULT_TIMEZONE = "UTC"

UNKNOWN_LABEL = "Unknown"

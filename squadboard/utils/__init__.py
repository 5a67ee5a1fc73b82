"""
Utilities package for Squadboard.

This package contains utility functions used throughout the application.
"""
from .time_utils import (
    CanonicalWeek, week_start, parse_time_of_day, fmt_hhmm, as_utc,
    round_half_up, percentage, month_key
)
from .constants import (
    APP_TITLE, ACTIVE_ROLES, ATTENDANCE_THRESHOLD_PERCENT, MAX_RECOMMENDED_SLOTS,
    DAYS_PER_WEEK, TIME_SLOT_WINDOWS, DEFAULT_TIME_SLOT, DAY_NAMES,
    RECENT_MATCHES_LIMIT, PERFORMANCE_MONTHS, FEEDBACK_PENDING_STATUS
)
from .logging_utils import configure_logging

__all__ = [
    "CanonicalWeek", "week_start", "parse_time_of_day", "fmt_hhmm", "as_utc",
    "round_half_up", "percentage", "month_key",
    "APP_TITLE", "ACTIVE_ROLES", "ATTENDANCE_THRESHOLD_PERCENT", "MAX_RECOMMENDED_SLOTS",
    "DAYS_PER_WEEK", "TIME_SLOT_WINDOWS", "DEFAULT_TIME_SLOT", "DAY_NAMES",
    "RECENT_MATCHES_LIMIT", "PERFORMANCE_MONTHS", "FEEDBACK_PENDING_STATUS",
    "configure_logging"
]

"""
Constants for the Squadboard analytics engine.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Squadboard"

# Roles that actually play. The store persists "remplacant" without the cedilla.
ACTIVE_ROLES = frozenset({"joueur", "capitaine", "remplaçant", "remplacant"})

# Recommended meeting slots
ATTENDANCE_THRESHOLD_PERCENT = 60
MAX_RECOMMENDED_SLOTS = 3
DAYS_PER_WEEK = 7

# Time-slot categories as (id, first hour, hour after last)
TIME_SLOT_WINDOWS = (
    ("morning", 8, 12),
    ("afternoon", 14, 18),
    ("evening", 19, 24),
)
DEFAULT_TIME_SLOT = "morning"

# 0=Sunday, matching the stored day_of_week column
DAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}

# Performance rollup
RECENT_MATCHES_LIMIT = 10
PERFORMANCE_MONTHS = 6

FEEDBACK_PENDING_STATUS = "pending"

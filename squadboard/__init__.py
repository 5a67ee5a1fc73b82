"""
Squadboard team analytics and scheduling engine

Turns raw team records (weekly availability, free-text match results, VOD
reviews, feedbacks) into an immutable team stats snapshot and a ranked list of
recommended meeting slots.

The Flask JSON API in :mod:`squadboard.ui` exposes both to the dashboard.
"""
from .exceptions import SquadboardError, DataSourceError, InvalidInputError
from .models import AvailabilitySlot, Outcome, TeamStats
from .services import AvailabilityService, TeamStatsService, classify, recommend_slots
from .utils import CanonicalWeek, week_start, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "SquadboardError", "DataSourceError", "InvalidInputError",
    "AvailabilitySlot", "Outcome", "TeamStats",
    "AvailabilityService", "TeamStatsService", "classify", "recommend_slots",
    "CanonicalWeek", "week_start", "APP_TITLE"
]

"""
Services package for Squadboard.

This package contains the classification, rollup, recommendation and
aggregation logic, plus the data store adapters it reads through.
"""
from .outcome_classifier import classify
from .slot_recommender import (
    SlotRecommender, recommend_slots, team_coverage, time_slot_for,
    attendance_threshold, available_members_at
)
from .analytics_service import AnalyticsService
from .persistence_service import TeamDataSource, InMemoryTeamStore, SQLiteTeamStore
from .availability_service import AvailabilityService
from .stats_service import TeamStatsService
from .service_factory import ServiceFactory

__all__ = [
    "classify", "SlotRecommender", "recommend_slots", "team_coverage", "time_slot_for",
    "attendance_threshold", "available_members_at", "AnalyticsService",
    "TeamDataSource", "InMemoryTeamStore", "SQLiteTeamStore",
    "AvailabilityService", "TeamStatsService", "ServiceFactory"
]

"""
Models package for Squadboard.

This package contains the records read from the team data store and the
derived values the engine produces from them.
"""
from .availability import AvailabilitySlot, SlotCandidate, CoverageReport
from .team import TeamMember, TeamEvent, ReviewRecord, FeedbackRecord, parse_timestamp
from .stats import (
    Outcome, MatchOutcomeRecord, ClassifiedOutcome, RecentMatch,
    MonthlyBucket, PerformanceSummary, TeamStats
)

__all__ = [
    "AvailabilitySlot", "SlotCandidate", "CoverageReport",
    "TeamMember", "TeamEvent", "ReviewRecord", "FeedbackRecord", "parse_timestamp",
    "Outcome", "MatchOutcomeRecord", "ClassifiedOutcome", "RecentMatch",
    "MonthlyBucket", "PerformanceSummary", "TeamStats"
]

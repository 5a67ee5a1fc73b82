"""Dataclasses describing match outcomes and the team stats snapshot."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .availability import SlotCandidate
from .team import parse_timestamp
from ..utils import CanonicalWeek


class Outcome(Enum):
    """Closed set of match results."""
    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


@dataclass(frozen=True)
class MatchOutcomeRecord:
    """
    A coaching/analysis session tied to a completed event.

    Attributes:
        id: Session id
        free_text_result: Result as typed by the staff ("Victoire 13-7", "d", ...)
        created_at: When the session was created; used for monthly bucketing
        event_title: Title of the linked event
        event_date: Start of the linked event, when known
    """
    id: str
    free_text_result: Optional[str]
    created_at: datetime
    event_title: str = ""
    event_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MatchOutcomeRecord':
        event_date = data.get("event_date")
        return cls(
            id=str(data["id"]),
            free_text_result=data.get("free_text_result"),
            created_at=parse_timestamp(data["created_at"]),
            event_title=data.get("event_title") or "",
            event_date=parse_timestamp(event_date) if event_date else None,
        )


@dataclass(frozen=True)
class ClassifiedOutcome:
    """Outcome of one record; derived on every aggregation pass, never stored."""
    occurred_at: datetime
    outcome: Outcome


@dataclass(frozen=True)
class RecentMatch:
    """Entry of the recent-matches trend list."""
    date: datetime
    result: Outcome
    score: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "result": self.result.value,
            "score": self.score,
        }


@dataclass(frozen=True)
class MonthlyBucket:
    """Wins over matches for one calendar month (``YYYY-MM``)."""
    period_key: str
    win_count: int
    total_count: int
    win_rate: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period_key,
            "winRate": self.win_rate,
            "matches": self.total_count,
            "wins": self.win_count,
        }


@dataclass(frozen=True)
class PerformanceSummary:
    """Output of the performance rollup."""
    wins: int
    losses: int
    draws: int
    win_rate: int
    recent_matches: Tuple[RecentMatch, ...] = ()
    performance_over_time: Tuple[MonthlyBucket, ...] = ()

    @property
    def total_matches(self) -> int:
        return self.wins + self.losses + self.draws


@dataclass(frozen=True)
class TeamStats:
    """
    Immutable snapshot of a team, recomputed in full on every request.

    Attributes:
        week_start: Canonical week used for the availability figures
        generated_at: Reference time the snapshot was computed for
        players_by_role: Member count per role (read-only mapping)
        total_availability_slots: Number of players expected to fill availability
        team_coverage: Saved slots over ``active_members * 7``, not capped at 100
    """
    week_start: CanonicalWeek
    generated_at: datetime

    total_members: int
    players_by_role: Mapping[str, int]
    active_members: int

    total_events: int
    upcoming_events: int
    past_events: int

    total_matches: int
    wins: int
    losses: int
    draws: int
    win_rate: int

    total_vods: int
    reviewed_vods: int

    current_week_availabilities: int
    total_availability_slots: int
    availability_rate: int

    total_feedbacks: int
    pending_feedbacks: int

    recent_matches: Tuple[RecentMatch, ...] = ()
    performance_over_time: Tuple[MonthlyBucket, ...] = ()
    recommended_slots: Tuple[SlotCandidate, ...] = ()
    team_coverage: int = 0

    def __post_init__(self) -> None:
        # Freeze the role mapping so the snapshot cannot drift after creation
        object.__setattr__(
            self, "players_by_role", MappingProxyType(dict(self.players_by_role))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary with camelCase keys."""
        return {
            "weekStart": self.week_start.isoformat(),
            "generatedAt": self.generated_at.isoformat(),
            "totalMembers": self.total_members,
            "playersByRole": dict(self.players_by_role),
            "activeMembers": self.active_members,
            "totalEvents": self.total_events,
            "upcomingEvents": self.upcoming_events,
            "pastEvents": self.past_events,
            "totalMatches": self.total_matches,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            "winRate": self.win_rate,
            "totalVODs": self.total_vods,
            "reviewedVODs": self.reviewed_vods,
            "currentWeekAvailabilities": self.current_week_availabilities,
            "totalAvailabilitySlots": self.total_availability_slots,
            "availabilityRate": self.availability_rate,
            "totalFeedbacks": self.total_feedbacks,
            "pendingFeedbacks": self.pending_feedbacks,
            "recentMatches": [m.to_dict() for m in self.recent_matches],
            "performanceOverTime": [b.to_dict() for b in self.performance_over_time],
            "recommendedSlots": [c.to_dict() for c in self.recommended_slots],
            "teamCoverage": self.team_coverage,
        }

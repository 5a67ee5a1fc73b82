"""
Availability models for Squadboard.

Players save weekly availability windows; the recommender turns them into
per-slot participation counts and candidate meeting times.
"""
from dataclasses import dataclass, field
from datetime import time
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple

from ..utils import CanonicalWeek, DAY_NAMES, fmt_hhmm, parse_time_of_day


@dataclass(frozen=True)
class AvailabilitySlot:
    """
    One availability window saved by a player for a canonical week.

    Attributes:
        owner_id: User id of the player who saved the slot
        day_of_week: 0..6 with 0 = Sunday
        start_time: Start of the window
        end_time: End of the window, strictly after ``start_time``
        week_start: Canonical week the slot belongs to
    """
    owner_id: str
    day_of_week: int
    start_time: time
    end_time: time
    week_start: CanonicalWeek

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "user_id": self.owner_id,
            "day_of_week": self.day_of_week,
            "start_time": fmt_hhmm(self.start_time),
            "end_time": fmt_hhmm(self.end_time),
            "week_start": self.week_start.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AvailabilitySlot':
        """Create from a stored row or JSON payload."""
        return cls(
            owner_id=str(data["user_id"]),
            day_of_week=int(data["day_of_week"]),
            start_time=parse_time_of_day(data["start_time"]),
            end_time=parse_time_of_day(data["end_time"]),
            week_start=CanonicalWeek.parse(data["week_start"]),
        )


@dataclass(frozen=True)
class SlotCandidate:
    """A (day, time-slot) pair proposed as a team meeting time."""
    day_of_week: int
    time_slot_id: str
    participant_count: int
    participation_percentage: int

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayOfWeek": self.day_of_week,
            "dayName": self.day_name,
            "timeSlotId": self.time_slot_id,
            "participantCount": self.participant_count,
            "participationPercentage": self.participation_percentage,
        }


@dataclass(frozen=True)
class CoverageReport:
    """
    Participation overview for one canonical week.

    ``participation`` maps ``(time_slot_id, day_of_week)`` to the number of
    distinct active players available, in first-encounter order.
    """
    week: CanonicalWeek
    active_member_count: int
    total_slot_records: int
    participation: Mapping[Tuple[str, int], int] = field(default_factory=dict)
    players_per_day: Mapping[int, int] = field(default_factory=dict)
    recommended_slots: Tuple[SlotCandidate, ...] = ()
    team_coverage: int = 0

    def __post_init__(self) -> None:
        # Read-only views, insertion order kept
        object.__setattr__(self, "participation", MappingProxyType(dict(self.participation)))
        object.__setattr__(self, "players_per_day", MappingProxyType(dict(self.players_per_day)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weekStart": self.week.isoformat(),
            "activeMemberCount": self.active_member_count,
            "totalSlotRecords": self.total_slot_records,
            "participation": [
                {"timeSlotId": slot_id, "dayOfWeek": day, "count": count}
                for (slot_id, day), count in self.participation.items()
            ],
            "playersPerDay": {str(day): count for day, count in self.players_per_day.items()},
            "recommendedSlots": [c.to_dict() for c in self.recommended_slots],
            "teamCoverage": self.team_coverage,
        }

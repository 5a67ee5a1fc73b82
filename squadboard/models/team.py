"""
Team records read from the data store.

These mirror the rows the dashboard keeps about a team; the engine only reads
them.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils import ACTIVE_ROLES, FEEDBACK_PENDING_STATUS, as_utc


def parse_timestamp(value: Any) -> datetime:
    """
    Accept a datetime or an ISO-8601 string (a trailing ``Z`` means UTC).

    Values without an offset are read as UTC, so every parsed timestamp is
    aware and can be compared with the request clock.
    """
    if isinstance(value, datetime):
        return as_utc(value) if value.tzinfo is None else value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return as_utc(parsed) if parsed.tzinfo is None else parsed


@dataclass(frozen=True)
class TeamMember:
    """A member of a team and their role."""
    user_id: str
    role: str
    display_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """Whether the role is a playing role."""
        return self.role in ACTIVE_ROLES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TeamMember':
        return cls(
            user_id=str(data["user_id"]),
            role=data.get("role") or "",
            display_name=data.get("display_name"),
        )


@dataclass(frozen=True)
class TeamEvent:
    """A scheduled team event (scrim, match, coaching session, ...)."""
    id: str
    type: str
    date_start: datetime
    date_end: datetime
    title: str = ""

    def is_upcoming(self, reference_time: datetime) -> bool:
        # Naive and aware timestamps both compare as UTC
        return as_utc(self.date_start) > as_utc(reference_time)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TeamEvent':
        return cls(
            id=str(data["id"]),
            type=data.get("type") or "",
            date_start=parse_timestamp(data["date_start"]),
            date_end=parse_timestamp(data["date_end"]),
            title=data.get("title") or "",
        )


@dataclass(frozen=True)
class ReviewRecord:
    """A VOD review; it counts as reviewed once it has notes."""
    id: str
    created_at: datetime
    notes: Optional[str] = None

    @property
    def is_reviewed(self) -> bool:
        return bool(self.notes and self.notes.strip())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReviewRecord':
        return cls(
            id=str(data["id"]),
            created_at=parse_timestamp(data["created_at"]),
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class FeedbackRecord:
    """Player feedback addressed to the staff."""
    id: str
    status: str
    created_at: datetime

    @property
    def is_pending(self) -> bool:
        return self.status == FEEDBACK_PENDING_STATUS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedbackRecord':
        return cls(
            id=str(data["id"]),
            status=data.get("status") or "",
            created_at=parse_timestamp(data["created_at"]),
        )

"""
Availability service for Squadboard.

Reads a team's weekly availability from the data store and validates the
replace-all write a player performs when saving their week.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import time
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ..exceptions import InvalidInputError
from ..models import AvailabilitySlot, CoverageReport
from ..utils import CanonicalWeek, parse_time_of_day
from .persistence_service import TeamDataSource, guarded
from .slot_recommender import SlotRecommender

logger = logging.getLogger(__name__)


def _require_week(week: Any) -> CanonicalWeek:
    if not isinstance(week, CanonicalWeek):
        raise InvalidInputError(
            f"Expected a CanonicalWeek from week_start(), got {type(week).__name__}"
        )
    return week


class AvailabilityService:
    """
    Data access and validation for weekly availability.

    Args:
        data_source: Store the slots live in
        recommender: Optional recommender used by :meth:`coverage_report`
    """

    def __init__(self, data_source: TeamDataSource, recommender: Optional[SlotRecommender] = None) -> None:
        self.data_source = data_source
        self.recommender = recommender or SlotRecommender()

    def validate_slots(
        self, user_id: str, week: CanonicalWeek, raw_slots: Sequence[Dict[str, Any]]
    ) -> List[AvailabilitySlot]:
        """
        Turn submitted slot payloads into :class:`AvailabilitySlot` objects.

        Args:
            user_id: Player saving the week
            week: Canonical week being saved
            raw_slots: Items with ``day_of_week``, ``start_time`` and ``end_time``

        Returns:
            Validated slots, in submission order

        Raises:
            InvalidInputError: On any malformed item; nothing is returned then
        """
        week = _require_week(week)
        if not user_id or not str(user_id).strip():
            raise InvalidInputError("A user id is required")

        errors: List[str] = []
        slots: List[AvailabilitySlot] = []
        seen: Set[Tuple[int, time]] = set()
        for index, raw in enumerate(raw_slots, start=1):
            if not isinstance(raw, dict):
                errors.append(f"Slot {index}: expected an object")
                continue
            try:
                day = int(raw.get("day_of_week"))
            except (TypeError, ValueError):
                errors.append(f"Slot {index}: day_of_week must be an integer")
                continue
            if not 0 <= day <= 6:
                errors.append(f"Slot {index}: day_of_week must be between 0 and 6")
                continue
            try:
                start = parse_time_of_day(raw.get("start_time"))
                end = parse_time_of_day(raw.get("end_time"))
            except ValueError as exc:
                errors.append(f"Slot {index}: {exc}")
                continue
            if start >= end:
                errors.append(f"Slot {index}: start_time must be before end_time")
                continue
            if (day, start) in seen:
                errors.append(f"Slot {index}: duplicates another slot starting at the same day and time")
                continue
            seen.add((day, start))
            slots.append(AvailabilitySlot(
                owner_id=str(user_id),
                day_of_week=day,
                start_time=start,
                end_time=end,
                week_start=week,
            ))

        if errors:
            raise InvalidInputError("Invalid availability: " + "; ".join(errors))
        return slots

    async def fetch_week(self, team_id: str, week: CanonicalWeek) -> List[AvailabilitySlot]:
        """All slots saved by the team's players for ``week``."""
        week = _require_week(week)
        return await guarded(
            self.data_source.get_availability_slots(team_id, week), "Loading availability"
        )

    async def replace_week(
        self, team_id: str, user_id: str, week: CanonicalWeek, raw_slots: Sequence[Dict[str, Any]]
    ) -> List[AvailabilitySlot]:
        """
        Replace everything ``user_id`` saved for ``week`` with ``raw_slots``.

        Validation happens before the store is touched, so a rejected payload
        leaves the previous week intact.

        Raises:
            InvalidInputError: If any slot is malformed
            DataSourceError: If the store write fails
        """
        slots = self.validate_slots(user_id, week, raw_slots)
        await guarded(
            self.data_source.replace_availability_for_week(team_id, str(user_id), week, slots),
            "Saving availability",
        )
        logger.info(
            "Saved %d availability slot(s) for user %s, team %s, week %s",
            len(slots), user_id, team_id, week,
        )
        return slots

    async def coverage_report(self, team_id: str, week: CanonicalWeek) -> CoverageReport:
        """Participation and recommended slots for ``week``."""
        week = _require_week(week)
        members, slots = await asyncio.gather(
            guarded(self.data_source.get_team_members(team_id), "Loading team members"),
            self.fetch_week(team_id, week),
        )
        active_ids = [member.user_id for member in members if member.is_active]
        return self.recommender.build_report(week, slots, active_ids)

"""
Coverage and optimal-slot recommendation for team availability.

Works on the availability slots of one canonical week and the number of
active members. Everything here is synchronous and reads no clock.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import time
from typing import Collection, Dict, Iterable, List, Sequence, Set, Tuple

from ..models import AvailabilitySlot, CoverageReport, SlotCandidate
from ..utils import (
    ATTENDANCE_THRESHOLD_PERCENT, CanonicalWeek, DAYS_PER_WEEK, DEFAULT_TIME_SLOT,
    MAX_RECOMMENDED_SLOTS, TIME_SLOT_WINDOWS, percentage
)


def time_slot_for(start_time: time) -> str:
    """
    Bucket a start time into ``morning``, ``afternoon`` or ``evening``.

    Hours outside every window (night, lunch break, 18:xx) fall back to
    ``morning``.
    """
    hour = start_time.hour
    for slot_id, first_hour, end_hour in TIME_SLOT_WINDOWS:
        if first_hour <= hour < end_hour:
            return slot_id
    return DEFAULT_TIME_SLOT


def attendance_threshold(active_member_count: int) -> int:
    """Minimum distinct participants for a slot to qualify (60%, rounded up)."""
    # Integer ceil of n * 60 / 100; avoids float noise such as 0.6 * n
    return -(-active_member_count * ATTENDANCE_THRESHOLD_PERCENT // 100)


def participation_by_slot(slots: Iterable[AvailabilitySlot]) -> Dict[Tuple[str, int], int]:
    """
    Count distinct players per ``(time_slot_id, day_of_week)``.

    The returned mapping keeps the order in which pairs were first seen.
    """
    members: "OrderedDict[Tuple[str, int], Set[str]]" = OrderedDict()
    for slot in slots:
        key = (time_slot_for(slot.start_time), slot.day_of_week)
        members.setdefault(key, set()).add(slot.owner_id)
    return OrderedDict((key, len(owners)) for key, owners in members.items())


def players_per_day(slots: Iterable[AvailabilitySlot]) -> Dict[int, int]:
    """Distinct players with at least one slot on each day that has any."""
    days: Dict[int, Set[str]] = {}
    for slot in slots:
        days.setdefault(slot.day_of_week, set()).add(slot.owner_id)
    return {day: len(owners) for day, owners in sorted(days.items())}


def available_members_at(slots: Iterable[AvailabilitySlot], day_of_week: int, hour: int) -> List[str]:
    """
    Players whose window covers ``hour`` on ``day_of_week``.

    A window covers the hours from its start hour up to, not including, its
    end hour. Ids are returned in first-seen order.
    """
    found: List[str] = []
    for slot in slots:
        if slot.day_of_week != day_of_week:
            continue
        if slot.start_time.hour <= hour < slot.end_time.hour and slot.owner_id not in found:
            found.append(slot.owner_id)
    return found


def recommend_slots(slots: Sequence[AvailabilitySlot], active_member_count: int) -> List[SlotCandidate]:
    """
    Propose up to three meeting slots for the week.

    A ``(time slot, day)`` pair qualifies when at least 60% of the active
    members (rounded up) saved a window starting in it. Candidates are ranked
    by participant count; ties keep first-seen order.

    Args:
        slots: Availability slots of one canonical week
        active_member_count: Number of active (playing) members

    Returns:
        Ranked candidates, empty when there are no active members
    """
    if active_member_count <= 0:
        return []

    threshold = attendance_threshold(active_member_count)
    candidates = [
        SlotCandidate(
            day_of_week=day,
            time_slot_id=slot_id,
            participant_count=count,
            participation_percentage=percentage(count, active_member_count),
        )
        for (slot_id, day), count in participation_by_slot(slots).items()
        if count >= threshold
    ]
    # sort() is stable, so equal counts stay in encounter order
    candidates.sort(key=lambda candidate: candidate.participant_count, reverse=True)
    return candidates[:MAX_RECOMMENDED_SLOTS]


def team_coverage(total_slot_records: int, active_member_count: int) -> int:
    """
    Saved slot records over ``active_member_count * 7``, as a percentage.

    Not capped: several windows per player and day push it past 100.
    """
    return percentage(total_slot_records, active_member_count * DAYS_PER_WEEK)


class SlotRecommender:
    """Builds a :class:`CoverageReport` for one canonical week."""

    def build_report(
        self,
        week: CanonicalWeek,
        slots: Sequence[AvailabilitySlot],
        active_member_ids: Collection[str],
    ) -> CoverageReport:
        """
        Summarize the active members' availability for ``week``.

        Slots saved by staff (coach, manager, ...) or by former members are
        left out, so participation never exceeds the active member count.
        """
        active = set(active_member_ids)
        active_member_count = len(active)
        week_slots = [
            slot for slot in slots
            if slot.week_start == week and slot.owner_id in active
        ]
        return CoverageReport(
            week=week,
            active_member_count=active_member_count,
            total_slot_records=len(week_slots),
            participation=participation_by_slot(week_slots),
            players_per_day=players_per_day(week_slots),
            recommended_slots=tuple(recommend_slots(week_slots, active_member_count)),
            team_coverage=team_coverage(len(week_slots), active_member_count),
        )

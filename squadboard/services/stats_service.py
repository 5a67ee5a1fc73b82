"""
Team stats snapshot aggregation.

Fans out the six independent store reads, then folds them into one immutable
:class:`TeamStats`. A failed read aborts the whole snapshot.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from datetime import datetime
from typing import Any, Awaitable, List, Optional, Sequence

from ..exceptions import DataSourceError
from ..models import (
    AvailabilitySlot, FeedbackRecord, MatchOutcomeRecord, ReviewRecord, TeamEvent,
    TeamMember, TeamStats
)
from ..utils import CanonicalWeek, percentage, week_start
from .analytics_service import AnalyticsService
from .persistence_service import TeamDataSource, guarded
from .slot_recommender import SlotRecommender

logger = logging.getLogger(__name__)


async def gather_all_or_cancel(*awaitables: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently and return their results in order.

    On the first failure the remaining ones are cancelled and the error is
    re-raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let cancelled tasks finish unwinding before propagating
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class TeamStatsService:
    """
    Build team stats snapshots.

    The reference time is always passed in; this service never reads the
    clock, so the current canonical week is ``week_start(reference_time)``.
    """

    def __init__(
        self,
        data_source: TeamDataSource,
        analytics_service: Optional[AnalyticsService] = None,
        recommender: Optional[SlotRecommender] = None,
    ) -> None:
        self.data_source = data_source
        self.analytics_service = analytics_service or AnalyticsService()
        self.recommender = recommender or SlotRecommender()

    async def get_team_stats(self, team_id: str, reference_time: datetime) -> TeamStats:
        """
        Compute the snapshot of ``team_id`` as of ``reference_time``.

        Args:
            team_id: Team to aggregate
            reference_time: "Now" for upcoming/past events and the current week

        Returns:
            A fully populated :class:`TeamStats`

        Raises:
            DataSourceError: If any of the reads fails; no partial snapshot
        """
        week = week_start(reference_time)
        source = self.data_source
        try:
            members, events, sessions, reviews, slots, feedbacks = await gather_all_or_cancel(
                guarded(source.get_team_members(team_id), "Loading team members"),
                guarded(source.get_events(team_id), "Loading events"),
                guarded(source.get_outcome_sessions(team_id), "Loading match results"),
                guarded(source.get_review_records(team_id), "Loading VOD reviews"),
                guarded(source.get_availability_slots(team_id, week), "Loading availability"),
                guarded(source.get_feedback_records(team_id), "Loading feedbacks"),
            )
        except DataSourceError:
            logger.error("Could not load stats for team %s", team_id, exc_info=True)
            raise

        stats = self.build_snapshot(
            week, reference_time, members, events, sessions, reviews, slots, feedbacks
        )
        logger.debug(
            "Built stats for team %s: %d members, %d matches, week %s",
            team_id, stats.total_members, stats.total_matches, week,
        )
        return stats

    def build_snapshot(
        self,
        week: CanonicalWeek,
        reference_time: datetime,
        members: Sequence[TeamMember],
        events: Sequence[TeamEvent],
        sessions: Sequence[MatchOutcomeRecord],
        reviews: Sequence[ReviewRecord],
        slots: Sequence[AvailabilitySlot],
        feedbacks: Sequence[FeedbackRecord],
    ) -> TeamStats:
        """Fold already-loaded records into a :class:`TeamStats` (no I/O)."""
        players_by_role = Counter(member.role for member in members)
        active_ids = [member.user_id for member in members if member.is_active]
        active_members = len(active_ids)

        upcoming = sum(1 for event in events if event.is_upcoming(reference_time))

        performance = self.analytics_service.summarize(sessions)

        available_users = {slot.owner_id for slot in slots if slot.week_start == week}
        coverage = self.recommender.build_report(week, slots, active_ids)

        return TeamStats(
            week_start=week,
            generated_at=reference_time,
            total_members=len(members),
            players_by_role=dict(players_by_role),
            active_members=active_members,
            total_events=len(events),
            upcoming_events=upcoming,
            past_events=len(events) - upcoming,
            total_matches=performance.total_matches,
            wins=performance.wins,
            losses=performance.losses,
            draws=performance.draws,
            win_rate=performance.win_rate,
            total_vods=len(reviews),
            reviewed_vods=sum(1 for review in reviews if review.is_reviewed),
            current_week_availabilities=len(available_users),
            total_availability_slots=active_members,
            availability_rate=percentage(len(available_users), active_members),
            total_feedbacks=len(feedbacks),
            pending_feedbacks=sum(1 for feedback in feedbacks if feedback.is_pending),
            recent_matches=performance.recent_matches,
            performance_over_time=performance.performance_over_time,
            recommended_slots=coverage.recommended_slots,
            team_coverage=coverage.team_coverage,
        )

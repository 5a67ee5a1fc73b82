"""Match performance rollups for the Squadboard analytics engine."""

from __future__ import annotations

from collections import Counter, OrderedDict
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from ..models import (
    ClassifiedOutcome, MatchOutcomeRecord, MonthlyBucket, Outcome,
    PerformanceSummary, RecentMatch
)
from ..utils import PERFORMANCE_MONTHS, RECENT_MATCHES_LIMIT, month_key, percentage
from .outcome_classifier import classify


class OutcomeClassifierInterface(Protocol):
    """Anything that maps a free-text result to an :class:`Outcome`."""

    def __call__(self, free_text: Optional[str]) -> Outcome:
        ...


class AnalyticsService:
    """
    Turn outcome records into win/loss/draw totals and a monthly win-rate series.

    The classifier is injected so callers can swap the vocabulary; it defaults
    to :func:`classify`.
    """

    def __init__(
        self,
        classifier: Optional[Callable[[Optional[str]], Outcome]] = None,
        recent_limit: int = RECENT_MATCHES_LIMIT,
        months: int = PERFORMANCE_MONTHS,
    ) -> None:
        self._classify: OutcomeClassifierInterface = classifier or classify
        self.recent_limit = recent_limit
        self.months = months

    def classify_records(self, records: Sequence[MatchOutcomeRecord]) -> List[ClassifiedOutcome]:
        """Classify every record, keyed on its creation time."""
        return [
            ClassifiedOutcome(occurred_at=record.created_at, outcome=self._classify(record.free_text_result))
            for record in records
        ]

    def performance_over_time(self, records: Sequence[MatchOutcomeRecord]) -> List[MonthlyBucket]:
        """
        Group records by the month they were created in.

        Buckets use the session's ``created_at``, not the match date. Only the
        last ``months`` buckets are kept, oldest first.
        """
        totals: Dict[str, List[int]] = OrderedDict()
        for item in self.classify_records(records):
            counts = totals.setdefault(month_key(item.occurred_at), [0, 0])
            counts[1] += 1
            if item.outcome is Outcome.WIN:
                counts[0] += 1

        buckets = [
            MonthlyBucket(
                period_key=key,
                win_count=wins,
                total_count=total,
                win_rate=percentage(wins, total),
            )
            for key, (wins, total) in totals.items()
        ]
        buckets.sort(key=lambda bucket: bucket.period_key)
        return buckets[-self.months:] if self.months > 0 else []

    def recent_matches(self, records: Sequence[MatchOutcomeRecord]) -> List[RecentMatch]:
        """Classify the first ``recent_limit`` records in the order supplied."""
        return [
            RecentMatch(
                date=record.event_date or record.created_at,
                result=self._classify(record.free_text_result),
                score=record.free_text_result,
            )
            for record in records[: self.recent_limit]
        ]

    def summarize(self, records: Sequence[MatchOutcomeRecord]) -> PerformanceSummary:
        """
        Build the full performance summary.

        Args:
            records: Outcome records, typically newest first

        Returns:
            Totals over all records, the recent-matches list and the monthly
            series
        """
        counter = Counter(item.outcome for item in self.classify_records(records))
        wins = counter.get(Outcome.WIN, 0)
        losses = counter.get(Outcome.LOSS, 0)
        draws = counter.get(Outcome.DRAW, 0)

        return PerformanceSummary(
            wins=wins,
            losses=losses,
            draws=draws,
            win_rate=percentage(wins, wins + losses + draws),
            recent_matches=tuple(self.recent_matches(records)),
            performance_over_time=tuple(self.performance_over_time(records)),
        )

"""
Unit tests for the team data store adapters.

Covers the SQLite queries, the transactional replace-all availability write,
and error wrapping.
"""
import asyncio
import os
import shutil
import tempfile
import unittest
from datetime import date, datetime, time, timezone

from squadboard.exceptions import DataSourceError
from squadboard.models import (
    AvailabilitySlot, FeedbackRecord, MatchOutcomeRecord, ReviewRecord, TeamEvent, TeamMember
)
from squadboard.services import InMemoryTeamStore, SQLiteTeamStore
from squadboard.utils import week_start

WEEK = week_start(date(2024, 3, 4))


def make_slot(owner: str, day: int, start: int, end: int, week=WEEK) -> AvailabilitySlot:
    return AvailabilitySlot(owner, day, time(start), time(end), week)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class SQLiteTeamStoreTests(unittest.TestCase):
    """Test cases for SQLiteTeamStore."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()
        self.store = SQLiteTeamStore(os.path.join(self.temp_dir, "team.db"))
        self.store.initialize()

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_replace_week_swaps_the_whole_set(self) -> None:
        asyncio.run(self.store.replace_availability_for_week(
            "t1", "u1", WEEK, [make_slot("u1", 2, 19, 23), make_slot("u1", 3, 9, 12)]
        ))
        asyncio.run(self.store.replace_availability_for_week(
            "t1", "u1", WEEK, [make_slot("u1", 5, 14, 18)]
        ))

        slots = asyncio.run(self.store.get_availability_slots("t1", WEEK))
        self.assertEqual(slots, [make_slot("u1", 5, 14, 18)])

    def test_replace_week_leaves_other_players_and_weeks_alone(self) -> None:
        asyncio.run(self.store.replace_availability_for_week("t1", "u2", WEEK, [make_slot("u2", 1, 9, 12)]))
        next_week = WEEK.shift(1)
        asyncio.run(self.store.replace_availability_for_week(
            "t1", "u1", next_week, [make_slot("u1", 1, 9, 12, week=next_week)]
        ))
        asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, [make_slot("u1", 2, 19, 23)]))
        asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, []))

        this_week = asyncio.run(self.store.get_availability_slots("t1", WEEK))
        following = asyncio.run(self.store.get_availability_slots("t1", next_week))
        self.assertEqual([s.owner_id for s in this_week], ["u2"])
        self.assertEqual([s.owner_id for s in following], ["u1"])

    def test_failed_insert_rolls_back_the_delete(self) -> None:
        asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, [make_slot("u1", 2, 19, 23)]))
        # day_of_week 9 violates the table CHECK constraint
        broken = [make_slot("u1", 3, 9, 12), make_slot("u1", 9, 9, 12)]

        with self.assertRaises(DataSourceError):
            asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, broken))

        slots = asyncio.run(self.store.get_availability_slots("t1", WEEK))
        self.assertEqual(slots, [make_slot("u1", 2, 19, 23)])

    def test_duplicate_slots_are_not_merged(self) -> None:
        asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, [make_slot("u1", 1, 9, 12)]))
        duplicates = [make_slot("u1", 2, 19, 21), make_slot("u1", 2, 19, 23)]

        with self.assertRaises(DataSourceError):
            asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, duplicates))

        slots = asyncio.run(self.store.get_availability_slots("t1", WEEK))
        self.assertEqual(slots, [make_slot("u1", 1, 9, 12)])

    def test_outcome_sessions_are_scoped_to_team_and_non_null(self) -> None:
        self.store.add_event("t1", TeamEvent("e1", "match", utc(2024, 3, 1, 20), utc(2024, 3, 1, 22), "Finale"))
        self.store.add_event("t2", TeamEvent("e2", "match", utc(2024, 3, 2, 20), utc(2024, 3, 2, 22), "Other"))
        self.store.add_outcome_session("e1", "s1", "Victoire 13-7", "2024-03-02T10:00:00Z")
        self.store.add_outcome_session("e1", "s2", None, "2024-03-03T10:00:00Z")
        self.store.add_outcome_session("e1", "s3", "défaite", "2024-03-04T10:00:00Z")
        self.store.add_outcome_session("e2", "s4", "win", "2024-03-05T10:00:00Z")

        sessions = asyncio.run(self.store.get_outcome_sessions("t1"))

        self.assertEqual([s.id for s in sessions], ["s3", "s1"])
        self.assertEqual(sessions[0].event_title, "Finale")
        self.assertEqual(sessions[0].event_date, utc(2024, 3, 1, 20))
        self.assertEqual(sessions[1].created_at, utc(2024, 3, 2, 10))

    def test_reads_members_events_reviews_and_feedbacks(self) -> None:
        self.store.add_member("t1", TeamMember("u1", "joueur", "Ace"))
        self.store.add_member("t1", TeamMember("u2", "coach"))
        self.store.add_event("t1", TeamEvent("e1", "scrim", utc(2024, 3, 1), utc(2024, 3, 1, 2)))
        self.store.add_event("t1", TeamEvent("e2", "match", utc(2024, 3, 8), utc(2024, 3, 8, 2)))
        self.store.add_review("t1", ReviewRecord("r1", utc(2024, 3, 1), "rotate earlier"))
        self.store.add_feedback("t1", FeedbackRecord("f1", "pending", utc(2024, 3, 1)))

        members = asyncio.run(self.store.get_team_members("t1"))
        events = asyncio.run(self.store.get_events("t1"))
        reviews = asyncio.run(self.store.get_review_records("t1"))
        feedbacks = asyncio.run(self.store.get_feedback_records("t1"))

        self.assertEqual({m.user_id: m.role for m in members}, {"u1": "joueur", "u2": "coach"})
        self.assertEqual([e.id for e in events], ["e2", "e1"])
        self.assertEqual(reviews[0].notes, "rotate earlier")
        self.assertTrue(feedbacks[0].is_pending)

    def test_sqlite_errors_become_data_source_errors(self) -> None:
        store = SQLiteTeamStore(os.path.join(self.temp_dir, "empty.db"))  # never initialized
        with self.assertRaises(DataSourceError) as ctx:
            asyncio.run(store.get_team_members("t1"))
        self.assertIsNotNone(ctx.exception.__cause__)


class InMemoryTeamStoreTests(unittest.TestCase):
    """Test cases for InMemoryTeamStore."""

    def setUp(self) -> None:
        self.store = InMemoryTeamStore()

    def test_replace_week(self) -> None:
        asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, [make_slot("u1", 2, 19, 23)]))
        asyncio.run(self.store.replace_availability_for_week("t1", "u2", WEEK, [make_slot("u2", 2, 19, 23)]))
        asyncio.run(self.store.replace_availability_for_week("t1", "u1", WEEK, []))

        slots = asyncio.run(self.store.get_availability_slots("t1", WEEK))
        self.assertEqual([s.owner_id for s in slots], ["u2"])
        self.assertEqual(asyncio.run(self.store.get_availability_slots("t1", WEEK.shift(1))), [])

    def test_outcome_sessions_skip_missing_results(self) -> None:
        self.store.add_outcome_session("t1", MatchOutcomeRecord("s1", None, utc(2024, 3, 1)))
        self.store.add_outcome_session("t1", MatchOutcomeRecord("s2", "v", utc(2024, 3, 2)))

        sessions = asyncio.run(self.store.get_outcome_sessions("t1"))
        self.assertEqual([s.id for s in sessions], ["s2"])


if __name__ == "__main__":
    unittest.main()

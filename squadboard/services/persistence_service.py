"""
Team data store adapters for Squadboard.

The engine reads team records through :class:`TeamDataSource`. Two adapters
are provided: an in-memory store for tests and demos, and a SQLite store for
single-file deployments. Both replace a player's weekly availability in one
step so readers never see the player with zero slots mid-write.
"""
import asyncio
import logging
import sqlite3
from contextlib import closing
from functools import partial
from typing import Any, Awaitable, Callable, Dict, List, Protocol, Sequence, Tuple, TypeVar

from ..exceptions import DataSourceError
from ..models import (
    AvailabilitySlot, FeedbackRecord, MatchOutcomeRecord, ReviewRecord,
    TeamEvent, TeamMember, parse_timestamp
)
from ..utils import CanonicalWeek

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TeamDataSource(Protocol):
    """Read/write contract of the external team data store."""

    async def get_team_members(self, team_id: str) -> List[TeamMember]:
        ...

    async def get_events(self, team_id: str) -> List[TeamEvent]:
        ...

    async def get_outcome_sessions(self, team_id: str) -> List[MatchOutcomeRecord]:
        """Sessions linked to the team's events that carry a result, newest first."""
        ...

    async def get_review_records(self, team_id: str) -> List[ReviewRecord]:
        ...

    async def get_availability_slots(self, team_id: str, week: CanonicalWeek) -> List[AvailabilitySlot]:
        ...

    async def get_feedback_records(self, team_id: str) -> List[FeedbackRecord]:
        ...

    async def replace_availability_for_week(
        self, team_id: str, user_id: str, week: CanonicalWeek, slots: Sequence[AvailabilitySlot]
    ) -> None:
        ...


class InMemoryTeamStore:
    """
    Dictionary-backed :class:`TeamDataSource`.

    Records are added with the ``add_*`` helpers. Reads return copies so
    callers cannot mutate the store.
    """

    def __init__(self) -> None:
        self._members: Dict[str, List[TeamMember]] = {}
        self._events: Dict[str, List[TeamEvent]] = {}
        self._sessions: Dict[str, List[MatchOutcomeRecord]] = {}
        self._reviews: Dict[str, List[ReviewRecord]] = {}
        self._feedbacks: Dict[str, List[FeedbackRecord]] = {}
        # (team_id, week) -> user_id -> slots
        self._availability: Dict[Tuple[str, CanonicalWeek], Dict[str, List[AvailabilitySlot]]] = {}

    # ---------- Seeding ---------- #

    def add_member(self, team_id: str, member: TeamMember) -> None:
        self._members.setdefault(team_id, []).append(member)

    def add_event(self, team_id: str, event: TeamEvent) -> None:
        self._events.setdefault(team_id, []).append(event)

    def add_outcome_session(self, team_id: str, record: MatchOutcomeRecord) -> None:
        self._sessions.setdefault(team_id, []).append(record)

    def add_review(self, team_id: str, record: ReviewRecord) -> None:
        self._reviews.setdefault(team_id, []).append(record)

    def add_feedback(self, team_id: str, record: FeedbackRecord) -> None:
        self._feedbacks.setdefault(team_id, []).append(record)

    # ---------- TeamDataSource ---------- #

    async def get_team_members(self, team_id: str) -> List[TeamMember]:
        return list(self._members.get(team_id, []))

    async def get_events(self, team_id: str) -> List[TeamEvent]:
        return sorted(self._events.get(team_id, []), key=lambda e: e.date_start, reverse=True)

    async def get_outcome_sessions(self, team_id: str) -> List[MatchOutcomeRecord]:
        sessions = [s for s in self._sessions.get(team_id, []) if s.free_text_result is not None]
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    async def get_review_records(self, team_id: str) -> List[ReviewRecord]:
        return list(self._reviews.get(team_id, []))

    async def get_availability_slots(self, team_id: str, week: CanonicalWeek) -> List[AvailabilitySlot]:
        by_user = self._availability.get((team_id, week), {})
        return [slot for slots in by_user.values() for slot in slots]

    async def get_feedback_records(self, team_id: str) -> List[FeedbackRecord]:
        return list(self._feedbacks.get(team_id, []))

    async def replace_availability_for_week(
        self, team_id: str, user_id: str, week: CanonicalWeek, slots: Sequence[AvailabilitySlot]
    ) -> None:
        by_user = self._availability.setdefault((team_id, week), {})
        # Single assignment, so concurrent readers see the old set or the new one
        if slots:
            by_user[user_id] = list(slots)
        else:
            by_user.pop(user_id, None)


SCHEMA = """
CREATE TABLE IF NOT EXISTS team_members (
    team_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    role TEXT NOT NULL,
    display_name TEXT,
    PRIMARY KEY (team_id, user_id)
);
CREATE TABLE IF NOT EXISTS events (
    id TEXT PRIMARY KEY,
    team_id TEXT NOT NULL,
    type TEXT NOT NULL,
    date_start TEXT NOT NULL,
    date_end TEXT NOT NULL,
    title TEXT NOT NULL DEFAULT ''
);
CREATE TABLE IF NOT EXISTS coaching_sessions (
    id TEXT PRIMARY KEY,
    event_id TEXT NOT NULL REFERENCES events(id),
    result TEXT,
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS vod_reviews (
    id TEXT PRIMARY KEY,
    team_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    notes TEXT
);
CREATE TABLE IF NOT EXISTS player_availabilities (
    team_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    week_start TEXT NOT NULL,
    day_of_week INTEGER NOT NULL CHECK (day_of_week BETWEEN 0 AND 6),
    start_time TEXT NOT NULL,
    end_time TEXT NOT NULL,
    PRIMARY KEY (team_id, user_id, week_start, day_of_week, start_time)
);
CREATE TABLE IF NOT EXISTS player_feedbacks (
    id TEXT PRIMARY KEY,
    team_id TEXT NOT NULL,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""


class SQLiteTeamStore:
    """
    :class:`TeamDataSource` backed by a SQLite file.

    Each call opens its own connection and runs in the event loop's default
    executor, so concurrent reads do not block the loop. ``sqlite3.Error`` is
    re-raised as :class:`DataSourceError`.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _run(self, work: Callable[[sqlite3.Connection], T]) -> T:
        try:
            with closing(self._connect()) as conn:
                # Connection context manager commits on success, rolls back on error
                with conn:
                    return work(conn)
        except sqlite3.Error as exc:
            logger.error("SQLite operation failed on %s: %s", self.db_path, exc)
            raise DataSourceError(f"Team data store error: {exc}") from exc

    async def _run_async(self, work: Callable[[sqlite3.Connection], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._run, work))

    def _query(self, sql: str, params: Tuple[Any, ...]) -> Callable[[sqlite3.Connection], List[sqlite3.Row]]:
        return lambda conn: conn.execute(sql, params).fetchall()

    # ---------- Setup and seeding ---------- #

    def initialize(self) -> None:
        """Create the tables if they do not exist yet."""
        self._run(lambda conn: conn.executescript(SCHEMA))

    def add_member(self, team_id: str, member: TeamMember) -> None:
        self._run(lambda conn: conn.execute(
            "INSERT OR REPLACE INTO team_members (team_id, user_id, role, display_name) VALUES (?, ?, ?, ?)",
            (team_id, member.user_id, member.role, member.display_name),
        ))

    def add_event(self, team_id: str, event: TeamEvent) -> None:
        self._run(lambda conn: conn.execute(
            "INSERT INTO events (id, team_id, type, date_start, date_end, title) VALUES (?, ?, ?, ?, ?, ?)",
            (event.id, team_id, event.type, event.date_start.isoformat(), event.date_end.isoformat(), event.title),
        ))

    def add_outcome_session(self, event_id: str, session_id: str, result: Any, created_at: Any) -> None:
        self._run(lambda conn: conn.execute(
            "INSERT INTO coaching_sessions (id, event_id, result, created_at) VALUES (?, ?, ?, ?)",
            (session_id, event_id, result, parse_timestamp(created_at).isoformat()),
        ))

    def add_review(self, team_id: str, record: ReviewRecord) -> None:
        self._run(lambda conn: conn.execute(
            "INSERT INTO vod_reviews (id, team_id, created_at, notes) VALUES (?, ?, ?, ?)",
            (record.id, team_id, record.created_at.isoformat(), record.notes),
        ))

    def add_feedback(self, team_id: str, record: FeedbackRecord) -> None:
        self._run(lambda conn: conn.execute(
            "INSERT INTO player_feedbacks (id, team_id, status, created_at) VALUES (?, ?, ?, ?)",
            (record.id, team_id, record.status, record.created_at.isoformat()),
        ))

    # ---------- TeamDataSource ---------- #

    async def get_team_members(self, team_id: str) -> List[TeamMember]:
        rows = await self._run_async(self._query(
            "SELECT user_id, role, display_name FROM team_members WHERE team_id = ?", (team_id,)
        ))
        return [TeamMember.from_dict(dict(row)) for row in rows]

    async def get_events(self, team_id: str) -> List[TeamEvent]:
        rows = await self._run_async(self._query(
            "SELECT id, type, date_start, date_end, title FROM events "
            "WHERE team_id = ? ORDER BY date_start DESC", (team_id,)
        ))
        return [TeamEvent.from_dict(dict(row)) for row in rows]

    async def get_outcome_sessions(self, team_id: str) -> List[MatchOutcomeRecord]:
        rows = await self._run_async(self._query(
            "SELECT s.id, s.result AS free_text_result, s.created_at, "
            "e.title AS event_title, e.date_start AS event_date "
            "FROM coaching_sessions s JOIN events e ON e.id = s.event_id "
            "WHERE e.team_id = ? AND s.result IS NOT NULL "
            "ORDER BY s.created_at DESC", (team_id,)
        ))
        return [MatchOutcomeRecord.from_dict(dict(row)) for row in rows]

    async def get_review_records(self, team_id: str) -> List[ReviewRecord]:
        rows = await self._run_async(self._query(
            "SELECT id, created_at, notes FROM vod_reviews WHERE team_id = ?", (team_id,)
        ))
        return [ReviewRecord.from_dict(dict(row)) for row in rows]

    async def get_availability_slots(self, team_id: str, week: CanonicalWeek) -> List[AvailabilitySlot]:
        rows = await self._run_async(self._query(
            "SELECT user_id, day_of_week, start_time, end_time, week_start FROM player_availabilities "
            "WHERE team_id = ? AND week_start = ? ORDER BY rowid", (team_id, week.isoformat())
        ))
        return [AvailabilitySlot.from_dict(dict(row)) for row in rows]

    async def get_feedback_records(self, team_id: str) -> List[FeedbackRecord]:
        rows = await self._run_async(self._query(
            "SELECT id, status, created_at FROM player_feedbacks WHERE team_id = ?", (team_id,)
        ))
        return [FeedbackRecord.from_dict(dict(row)) for row in rows]

    async def replace_availability_for_week(
        self, team_id: str, user_id: str, week: CanonicalWeek, slots: Sequence[AvailabilitySlot]
    ) -> None:
        rows = [
            (team_id, user_id, week.isoformat(), slot.day_of_week,
             slot.start_time.isoformat(timespec="seconds"), slot.end_time.isoformat(timespec="seconds"))
            for slot in slots
        ]

        def replace(conn: sqlite3.Connection) -> None:
            # Delete and insert share one transaction
            conn.execute(
                "DELETE FROM player_availabilities WHERE team_id = ? AND user_id = ? AND week_start = ?",
                (team_id, user_id, week.isoformat()),
            )
            conn.executemany(
                "INSERT INTO player_availabilities "
                "(team_id, user_id, week_start, day_of_week, start_time, end_time) VALUES (?, ?, ?, ?, ?, ?)",
                rows,
            )

        await self._run_async(replace)


async def guarded(awaitable: Awaitable[T], operation: str) -> T:
    """
    Await a store call, reporting any failure as :class:`DataSourceError`.

    Args:
        awaitable: Pending store call
        operation: Short description used in the error message
    """
    try:
        return await awaitable
    except DataSourceError:
        raise
    except Exception as exc:
        raise DataSourceError(f"{operation} failed: {exc}") from exc

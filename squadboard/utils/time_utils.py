"""
Date and time helpers for the Squadboard analytics engine.

``week_start`` is the only place where a date is turned into a canonical week;
every availability read and write goes through it.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Union


@dataclass(frozen=True, order=True)
class CanonicalWeek:
    """
    A Monday-aligned week, the alignment key of all availability data.

    Obtain one through :func:`week_start` or :meth:`parse`; constructing it
    directly from anything but a Monday raises ``ValueError``.
    """
    start: date

    def __post_init__(self) -> None:
        if isinstance(self.start, datetime) or not isinstance(self.start, date):
            raise TypeError("CanonicalWeek.start must be a date")
        if self.start.weekday() != 0:
            raise ValueError(f"{self.start.isoformat()} is not a Monday; use week_start()")

    @classmethod
    def parse(cls, text: str) -> "CanonicalWeek":
        """Parse ``YYYY-MM-DD`` (any day of the week) into its canonical week."""
        return week_start(date.fromisoformat(text))

    def isoformat(self) -> str:
        return self.start.isoformat()

    def shift(self, weeks: int) -> "CanonicalWeek":
        return CanonicalWeek(self.start + timedelta(weeks=weeks))

    def day(self, day_of_week: int) -> date:
        """Calendar date of a 0=Sunday weekday inside this week."""
        if not 0 <= day_of_week <= 6:
            raise ValueError(f"day_of_week must be in 0..6, got {day_of_week}")
        offset = 6 if day_of_week == 0 else day_of_week - 1
        return self.start + timedelta(days=offset)

    def contains(self, value: Union[date, datetime]) -> bool:
        return week_start(value) == self

    def __str__(self) -> str:
        return self.isoformat()


def week_start(value: Union[date, datetime]) -> CanonicalWeek:
    """
    Return the Monday-start week containing ``value``.

    Weeks run Monday..Sunday, so a Sunday belongs to the week that began six
    days earlier. Datetimes are truncated to their own calendar date, no
    time-zone conversion happens here.

    Example:
        >>> week_start(date(2024, 3, 10)).isoformat()  # a Sunday
        '2024-03-04'
    """
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        raise TypeError(f"week_start expects a date, got {type(value).__name__}")
    return CanonicalWeek(value - timedelta(days=value.weekday()))


def parse_time_of_day(text: str) -> time:
    """
    Parse ``HH:MM`` or ``HH:MM:SS`` into a :class:`datetime.time`.

    Raises:
        ValueError: If the text is not a valid time of day
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected a time string, got {text!r}")
    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"Invalid time of day: {text!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return time(hour, minute, second)


def fmt_hhmm(value: time) -> str:
    """
    Format a time of day as ``HH:MM``.

    Example:
        >>> fmt_hhmm(time(19, 0))
        '19:00'
    """
    return f"{value.hour:02d}:{value.minute:02d}"


def as_utc(moment: datetime) -> datetime:
    """
    Return ``moment`` as an aware UTC datetime.

    Naive values are taken to already be in UTC.
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves going up.

    Python's ``round`` uses banker's rounding (``round(62.5) == 62``); the
    percentages shown on the dashboard round halves up.
    """
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    """Whole-number percentage of ``part`` over ``whole``, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def month_key(moment: Union[date, datetime]) -> str:
    """Format a date as its ``YYYY-MM`` period key."""
    return f"{moment.year}-{moment.month:02d}"

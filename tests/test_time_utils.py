"""
Unit tests for week normalization and the numeric helpers.
"""
import unittest
from datetime import date, datetime, time, timedelta, timezone

from squadboard.utils import (
    CanonicalWeek, week_start, parse_time_of_day, fmt_hhmm, as_utc,
    round_half_up, percentage, month_key
)


class WeekStartTests(unittest.TestCase):
    """Weeks run Monday..Sunday."""

    def test_every_day_of_a_week_maps_to_its_monday(self) -> None:
        monday = date(2024, 3, 4)
        for offset in range(7):
            with self.subTest(day=monday + timedelta(days=offset)):
                self.assertEqual(week_start(monday + timedelta(days=offset)).start, monday)

    def test_sunday_belongs_to_previous_monday(self) -> None:
        self.assertEqual(week_start(date(2024, 3, 10)).isoformat(), "2024-03-04")
        self.assertEqual(week_start(date(2024, 3, 11)).isoformat(), "2024-03-11")

    def test_datetime_is_truncated_to_its_date(self) -> None:
        self.assertEqual(week_start(datetime(2024, 3, 10, 23, 59)), week_start(date(2024, 3, 4)))

    def test_next_week_is_exactly_seven_days_later(self) -> None:
        for day in (date(2024, 2, 26), date(2024, 3, 3), date(2024, 12, 31)):
            with self.subTest(day=day):
                delta = week_start(day + timedelta(days=7)).start - week_start(day).start
                self.assertEqual(delta, timedelta(days=7))

    def test_week_across_year_boundary(self) -> None:
        self.assertEqual(week_start(date(2025, 1, 1)).isoformat(), "2024-12-30")

    def test_rejects_non_dates(self) -> None:
        with self.assertRaises(TypeError):
            week_start("2024-03-04")


class CanonicalWeekTests(unittest.TestCase):
    def test_direct_construction_requires_a_monday(self) -> None:
        CanonicalWeek(date(2024, 3, 4))
        with self.assertRaises(ValueError):
            CanonicalWeek(date(2024, 3, 5))

    def test_parse_normalizes_any_day(self) -> None:
        self.assertEqual(CanonicalWeek.parse("2024-03-07"), week_start(date(2024, 3, 4)))

    def test_day_uses_sunday_zero_numbering(self) -> None:
        week = CanonicalWeek.parse("2024-03-04")
        self.assertEqual(week.day(1), date(2024, 3, 4))
        self.assertEqual(week.day(2), date(2024, 3, 5))
        self.assertEqual(week.day(0), date(2024, 3, 10))
        with self.assertRaises(ValueError):
            week.day(7)

    def test_shift_and_contains(self) -> None:
        week = CanonicalWeek.parse("2024-03-04")
        self.assertEqual(week.shift(1).isoformat(), "2024-03-11")
        self.assertEqual(week.shift(-1).isoformat(), "2024-02-26")
        self.assertTrue(week.contains(date(2024, 3, 10)))
        self.assertFalse(week.contains(date(2024, 3, 11)))
        self.assertEqual(str(week), "2024-03-04")


class HelperTests(unittest.TestCase):
    def test_parse_time_of_day(self) -> None:
        self.assertEqual(parse_time_of_day("19:00"), time(19, 0))
        self.assertEqual(parse_time_of_day("09:30:15"), time(9, 30, 15))
        for bad in ("7pm", "25:00", "9:00", "", None, "12:60"):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    parse_time_of_day(bad)

    def test_fmt_hhmm(self) -> None:
        self.assertEqual(fmt_hhmm(time(9, 5)), "09:05")

    def test_percentages_round_half_up(self) -> None:
        self.assertEqual(round_half_up(62.5), 63)
        self.assertEqual(round_half_up(12.49), 12)
        self.assertEqual(percentage(3, 5), 60)
        self.assertEqual(percentage(2, 3), 67)
        self.assertEqual(percentage(1, 8), 13)
        self.assertEqual(percentage(5, 0), 0)

    def test_month_key(self) -> None:
        self.assertEqual(month_key(datetime(2024, 3, 1, 8)), "2024-03")
        self.assertEqual(month_key(date(2023, 11, 30)), "2023-11")

    def test_as_utc_reads_naive_values_as_utc(self) -> None:
        naive = datetime(2024, 3, 8, 20, 0)
        paris = timezone(timedelta(hours=1))

        self.assertEqual(as_utc(naive), datetime(2024, 3, 8, 20, 0, tzinfo=timezone.utc))
        self.assertEqual(as_utc(datetime(2024, 3, 8, 21, 0, tzinfo=paris)).hour, 20)
        self.assertIs(as_utc(naive).tzinfo, timezone.utc)


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for calendar math.

Conventions checked here:
- fall starts September 1, spring on the first Monday on/after February 1
- weeks start on Monday, Sunday belongs to the previous Monday
- week numbers are 0-based
"""

import unittest
from datetime import date, datetime

from ttschedule.model import Period
from ttschedule.weeks import (
    academic_year,
    adjacent_semester,
    date_for_week,
    monday,
    same_weekday,
    semester_start,
    semester_weeks,
    week_number,
    weekday_index,
    weekday_name,
)


class TestSemesterStart(unittest.TestCase):
    def test_fall_is_september_first(self) -> None:
        self.assertEqual(semester_start(Period.FALL_SEMESTER, 2025), date(2025, 9, 1))

    def test_spring_first_monday_of_february(self) -> None:
        # Feb 1 2026 is a Sunday
        self.assertEqual(semester_start(Period.SPRING_SEMESTER, 2026), date(2026, 2, 2))
        # Feb 1 2025 is a Saturday
        self.assertEqual(semester_start(Period.SPRING_SEMESTER, 2025), date(2025, 2, 3))

    def test_spring_when_february_first_is_monday(self) -> None:
        self.assertEqual(semester_start(Period.SPRING_SEMESTER, 2021), date(2021, 2, 1))

    def test_session_uses_adjacent_semester(self) -> None:
        self.assertEqual(semester_start(Period.WINTER_SESSION, 2025), date(2025, 9, 1))
        self.assertEqual(semester_start(Period.SUMMER_SESSION, 2026), date(2026, 2, 2))

    def test_year_defaults_to_today(self) -> None:
        self.assertEqual(
            semester_start(Period.FALL_SEMESTER, today=date(2030, 5, 5)),
            date(2030, 9, 1),
        )


class TestMonday(unittest.TestCase):
    def test_midweek(self) -> None:
        self.assertEqual(monday(date(2025, 9, 10)), date(2025, 9, 8))

    def test_sunday_maps_to_previous_monday(self) -> None:
        self.assertEqual(monday(date(2025, 9, 14)), date(2025, 9, 8))

    def test_accepts_datetime(self) -> None:
        self.assertEqual(monday(datetime(2025, 9, 8, 23, 30)), date(2025, 9, 8))


class TestWeekNumber(unittest.TestCase):
    def test_first_week_is_zero(self) -> None:
        self.assertEqual(week_number(Period.FALL_SEMESTER, date(2025, 9, 1)), 0)
        self.assertEqual(week_number(Period.FALL_SEMESTER, date(2025, 9, 7)), 0)

    def test_one_week_elapsed(self) -> None:
        self.assertEqual(week_number(Period.FALL_SEMESTER, date(2025, 9, 8)), 1)

    def test_start_on_sunday_counts_from_previous_monday(self) -> None:
        # Sep 1 2024 is a Sunday, so week 0 began on Aug 26
        self.assertEqual(week_number(Period.FALL_SEMESTER, date(2024, 9, 2), year=2024), 1)

    def test_before_semester_is_negative(self) -> None:
        self.assertEqual(week_number(Period.SPRING_SEMESTER, date(2026, 1, 26)), -1)

    def test_january_belongs_to_previous_fall(self) -> None:
        self.assertEqual(academic_year(Period.FALL_SEMESTER, date(2026, 1, 12)), 2025)
        self.assertEqual(academic_year(Period.WINTER_SESSION, date(2026, 1, 12)), 2025)
        self.assertGreater(week_number(Period.FALL_SEMESTER, date(2026, 1, 12)), 17)


class TestSemesterWeeks(unittest.TestCase):
    def test_default_count_and_bounds(self) -> None:
        weeks = semester_weeks(Period.FALL_SEMESTER, 2025)
        self.assertEqual(len(weeks), 18)
        self.assertEqual(weeks[0].week, 0)
        self.assertEqual(weeks[0].start, datetime(2025, 9, 1))
        self.assertEqual(weeks[0].end, datetime(2025, 9, 7, 23, 59, 59, 999000))
        self.assertEqual(weeks[17].start, datetime(2025, 12, 29))

    def test_custom_count(self) -> None:
        weeks = semester_weeks(Period.SPRING_SEMESTER, 2026, week_count=2)
        self.assertEqual([w.week for w in weeks], [0, 1, 2])
        self.assertEqual(weeks[1].start, datetime(2026, 2, 9))


class TestWeekdays(unittest.TestCase):
    def test_names(self) -> None:
        self.assertEqual(weekday_name(0), "Воскресенье")
        self.assertEqual(weekday_name(1), "Понедельник")
        self.assertEqual(weekday_name(6), "Суббота")
        self.assertEqual(weekday_name(7), "")

    def test_index_sunday_is_zero(self) -> None:
        self.assertEqual(weekday_index(date(2025, 9, 7)), 0)
        self.assertEqual(weekday_index(date(2025, 9, 8)), 1)

    def test_header_match_is_case_insensitive(self) -> None:
        self.assertTrue(same_weekday("ПОНЕДЕЛЬНИК", 1))
        self.assertTrue(same_weekday(" понедельник ", 1))
        self.assertFalse(same_weekday("Вторник", 1))

    def test_date_for_week(self) -> None:
        self.assertEqual(date_for_week(Period.FALL_SEMESTER, 1, 1, 2025), date(2025, 9, 8))
        # Sunday closes the week
        self.assertEqual(date_for_week(Period.FALL_SEMESTER, 0, 0, 2025), date(2025, 9, 7))


class TestAdjacentSemester(unittest.TestCase):
    def test_sessions(self) -> None:
        self.assertEqual(adjacent_semester(Period.WINTER_SESSION), Period.FALL_SEMESTER)
        self.assertEqual(adjacent_semester(Period.SUMMER_SESSION), Period.SPRING_SEMESTER)

    def test_semesters_map_to_themselves(self) -> None:
        self.assertEqual(adjacent_semester(Period.FALL_SEMESTER), Period.FALL_SEMESTER)


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for period classification, holidays and lesson time tables.
"""

import unittest
from datetime import date

from ttschedule.holidays import find_holiday, is_holiday
from ttschedule.model import EducationType, Holiday, Period, Time
from ttschedule.periods import classify_period, is_session_period, period_from_label, resolve_period
from ttschedule.timeslots import lesson_number, time_slots


class TestClassifyPeriod(unittest.TestCase):
    def test_boundaries(self) -> None:
        cases = [
            (date(2025, 9, 1), Period.FALL_SEMESTER),
            (date(2025, 12, 24), Period.FALL_SEMESTER),
            (date(2025, 12, 25), Period.WINTER_SESSION),
            (date(2026, 1, 31), Period.WINTER_SESSION),
            (date(2026, 2, 1), Period.SPRING_SEMESTER),
            (date(2026, 5, 31), Period.SPRING_SEMESTER),
            (date(2026, 6, 1), Period.SUMMER_SESSION),
            (date(2026, 8, 31), Period.SUMMER_SESSION),
        ]
        for day, expected in cases:
            with self.subTest(day=day):
                self.assertEqual(classify_period(day), expected)

    def test_explicit_period_wins(self) -> None:
        self.assertEqual(resolve_period(date(2025, 10, 1), Period.SUMMER_SESSION), Period.SUMMER_SESSION)
        self.assertEqual(resolve_period(date(2025, 10, 1)), Period.FALL_SEMESTER)

    def test_sessions(self) -> None:
        self.assertTrue(is_session_period(Period.WINTER_SESSION))
        self.assertFalse(is_session_period(Period.SPRING_SEMESTER))

    def test_banner_labels(self) -> None:
        self.assertEqual(period_from_label(" Зимняя сессия "), Period.WINTER_SESSION)
        self.assertIsNone(period_from_label("каникулы"))


class TestHolidays(unittest.TestCase):
    def test_default_list(self) -> None:
        self.assertTrue(is_holiday(date(2026, 1, 7)))
        self.assertTrue(is_holiday(date(2025, 11, 4)))
        self.assertFalse(is_holiday(date(2025, 11, 5)))
        self.assertEqual(find_holiday(date(2026, 5, 9)).name, "День Победы")

    def test_empty_list_disables(self) -> None:
        self.assertFalse(is_holiday(date(2026, 1, 1), []))

    def test_custom_list(self) -> None:
        custom = [Holiday(9, 1, "День знаний")]
        self.assertTrue(is_holiday(date(2025, 9, 1), custom))
        self.assertFalse(is_holiday(date(2026, 1, 1), custom))


class TestTimeSlots(unittest.TestCase):
    def test_tables(self) -> None:
        self.assertEqual(len(time_slots(EducationType.HIGHER)), 8)
        self.assertEqual(len(time_slots(EducationType.VOCATIONAL)), 7)
        self.assertEqual(time_slots(EducationType.HIGHER)[2].start, Time(11, 40))

    def test_nearest_start(self) -> None:
        self.assertEqual(lesson_number(Time(9, 50)), 2)
        self.assertEqual(lesson_number(Time(13, 35)), 4)
        self.assertEqual(lesson_number(Time(7, 0)), 1)
        self.assertEqual(lesson_number(Time(9, 55), EducationType.VOCATIONAL), 2)

    def test_tie_prefers_earlier_slot(self) -> None:
        # 15:50 is 50 minutes after slot 5 and 50 minutes before slot 6
        self.assertEqual(lesson_number(Time(15, 50)), 5)


if __name__ == "__main__":
    unittest.main()

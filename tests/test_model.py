"""
Unit tests for the plain-dict form of day records (used for caching).
"""

import json
import unittest
from datetime import date

from ttschedule.model import (
    DatedDay,
    FullScheduleSlot,
    RecurringDay,
    ScheduleEntry,
    Substitution,
    Teacher,
    Time,
    TransferInfo,
    WeekRange,
    day_from_dict,
    day_to_dict,
)


class TestDayDicts(unittest.TestCase):
    def test_recurring_day_with_changes_survives_json(self) -> None:
        entry = ScheduleEntry(
            subject="Математика",
            room="Б-203",
            type="лк",
            weeks=WeekRange(2, 16),
            teacher=Teacher(name="Иванов И.И.", position="доц.", degree="к.т.н."),
            subgroup=1,
            week_parity="odd",
            substitutions=(Substitution(date=date(2025, 9, 8), teacher=Teacher(name="Петров П.П.")),),
            transfer=TransferInfo(date(2025, 9, 11), date(2025, 9, 8), 3, "Математика"),
            possible_changes=True,
        )
        day = RecurringDay(
            weekday="Понедельник",
            slots=(FullScheduleSlot(3, Time(11, 40), Time(13, 0), (entry,)),),
        )

        d = json.loads(json.dumps(day_to_dict(day)))
        self.assertEqual(d["slots"][0]["time_start"], "11:40")
        self.assertNotIn("date", d)
        self.assertEqual(day_from_dict(d), day)

    def test_dated_day(self) -> None:
        day = DatedDay(
            date=date(2025, 12, 24),
            weekday="Среда",
            slots=(FullScheduleSlot(2, Time(9, 50), Time(11, 10), (ScheduleEntry(subject="Физика", type="экз"),)),),
        )
        d = day_to_dict(day)
        self.assertEqual(d["date"], "2025-12-24")
        self.assertNotIn("transfer", d["slots"][0]["entries"][0])
        restored = day_from_dict(d)
        self.assertIsInstance(restored, DatedDay)
        self.assertEqual(restored, day)


if __name__ == "__main__":
    unittest.main()

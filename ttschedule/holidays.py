"""
Non-working public holidays.

The default list is the fixed set of domestic holidays (Labour Code,
article 112). Pass an empty list wherever `holidays` is accepted to disable
holiday suppression.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ttschedule.model import Holiday

DEFAULT_HOLIDAYS: List[Holiday] = [
    Holiday(1, 1, "Новый год"),
    Holiday(1, 2, "Новогодние каникулы"),
    Holiday(1, 3, "Новогодние каникулы"),
    Holiday(1, 4, "Новогодние каникулы"),
    Holiday(1, 5, "Новогодние каникулы"),
    Holiday(1, 6, "Новогодние каникулы"),
    Holiday(1, 7, "Рождество Христово"),
    Holiday(1, 8, "Новогодние каникулы"),
    Holiday(2, 23, "День защитника Отечества"),
    Holiday(3, 8, "Международный женский день"),
    Holiday(5, 1, "Праздник Весны и Труда"),
    Holiday(5, 9, "День Победы"),
    Holiday(6, 12, "День России"),
    Holiday(11, 4, "День народного единства"),
]


def find_holiday(day: date, holidays: Optional[Iterable[Holiday]] = None) -> Optional[Holiday]:
    if holidays is None:
        holidays = DEFAULT_HOLIDAYS
    for h in holidays:
        if h.month == day.month and h.day == day.day:
            return h
    return None


def is_holiday(day: date, holidays: Optional[Iterable[Holiday]] = None) -> bool:
    """
    True if `day` matches a holiday by month and day of month.
    """
    return find_holiday(day, holidays) is not None

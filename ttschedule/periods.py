"""
Period classification.

Maps a calendar date to one of the four academic periods:

    Dec 25 - Jan 31   winter session
    Feb 1  - May 31   spring semester
    Jun 1  - Aug 31   summer session
    Sep 1  - Dec 24   fall semester

Sessions are date-keyed timetables, semesters repeat by weekday.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from ttschedule.model import Period

# Banner labels shown by the timetable site ("идет <label>")
PERIOD_LABELS: Dict[str, Period] = {
    "осенний семестр": Period.FALL_SEMESTER,
    "зимняя сессия": Period.WINTER_SESSION,
    "весенний семестр": Period.SPRING_SEMESTER,
    "летняя сессия": Period.SUMMER_SESSION,
}


def classify_period(day: date) -> Period:
    month = day.month
    if month == 1 or (month == 12 and day.day >= 25):
        return Period.WINTER_SESSION
    if 2 <= month <= 5:
        return Period.SPRING_SEMESTER
    if 6 <= month <= 8:
        return Period.SUMMER_SESSION
    return Period.FALL_SEMESTER


def is_session_period(period: Period) -> bool:
    return period in (Period.WINTER_SESSION, Period.SUMMER_SESSION)


def resolve_period(day: date, explicit: Optional[Period] = None) -> Period:
    """
    Return `explicit` when given, otherwise the period `day` falls into.
    """
    if explicit is not None:
        return Period(explicit)
    return classify_period(day)


def period_from_label(label: str) -> Optional[Period]:
    return PERIOD_LABELS.get(label.strip().lower())

"""
Calendar math.

Pure functions for semester start dates, week numbering and weekday names.

Conventions used throughout the package:
- weekday indexes follow the timetable site: 0 = Sunday ... 6 = Saturday
- weeks start on Monday; Sunday belongs to the week of the previous Monday
- week numbers are 0-based: the week containing the semester start is week 0
- the spring semester starts on the first Monday on/after February 1
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from ttschedule.model import Period, SemesterWeek

WEEKS_PER_SEMESTER = 17

WEEKDAY_NAMES = [
    "Воскресенье",
    "Понедельник",
    "Вторник",
    "Среда",
    "Четверг",
    "Пятница",
    "Суббота",
]


def weekday_index(day: date) -> int:
    """
    Return the weekday of `day` as 0 = Sunday ... 6 = Saturday.
    """
    return day.isoweekday() % 7


def weekday_name(index: int) -> str:
    """
    Return the weekday name used in timetable headers, or "" for an
    index outside 0..6.
    """
    if 0 <= index < len(WEEKDAY_NAMES):
        return WEEKDAY_NAMES[index]
    return ""


def same_weekday(label: str, index: int) -> bool:
    # headers are compared case-insensitively
    name = weekday_name(index)
    return bool(name) and label.strip().lower() == name.lower()


def adjacent_semester(period: Period) -> Period:
    """
    Return the weekday-recurring semester a session belongs to.
    Semesters map to themselves.
    """
    if period == Period.WINTER_SESSION:
        return Period.FALL_SEMESTER
    if period == Period.SUMMER_SESSION:
        return Period.SPRING_SEMESTER
    return period


def academic_year(period: Period, day: date) -> int:
    """
    Return the calendar year whose semester start applies to `day`.

    A January date still belongs to the fall semester that began in
    September of the previous year.
    """
    semester = adjacent_semester(period)
    if semester == Period.FALL_SEMESTER and day.month < 7:
        return day.year - 1
    return day.year


def monday(day: date) -> date:
    """
    Return the Monday of the week containing `day`.
    """
    if isinstance(day, datetime):
        day = day.date()
    return day - timedelta(days=day.weekday())


def semester_start(period: Period, year: Optional[int] = None, today: Optional[date] = None) -> date:
    """
    Fall: September 1 of `year`.
    Spring: first Monday on/after February 1 of `year`.

    Sessions use the start of their adjacent semester. `year` defaults to
    the year of `today` (itself defaulting to the current date).
    """
    if year is None:
        year = (today or date.today()).year

    if adjacent_semester(period) == Period.FALL_SEMESTER:
        return date(year, 9, 1)

    feb1 = date(year, 2, 1)
    return feb1 + timedelta(days=(7 - feb1.weekday()) % 7)


def semester_weeks(
    period: Period,
    year: Optional[int] = None,
    week_count: int = WEEKS_PER_SEMESTER,
    today: Optional[date] = None,
) -> List[SemesterWeek]:
    """
    Return week_count + 1 consecutive weeks starting at the Monday of the
    semester start. Each week spans Monday 00:00 to Sunday 23:59:59.999.
    """
    first = monday(semester_start(period, year, today))
    weeks: List[SemesterWeek] = []
    for i in range(week_count + 1):
        start_day = first + timedelta(weeks=i)
        end_day = start_day + timedelta(days=6)
        weeks.append(
            SemesterWeek(
                week=i,
                start=datetime.combine(start_day, time.min),
                end=datetime.combine(end_day, time(23, 59, 59, 999000)),
            )
        )
    return weeks


def week_number(period: Period, day: date, year: Optional[int] = None) -> int:
    """
    0-based count of whole weeks between the semester's first Monday and
    the Monday of `day`.

    Negative values and values above WEEKS_PER_SEMESTER are returned as-is;
    callers treat them as "outside the semester".
    """
    if isinstance(day, datetime):
        day = day.date()
    if year is None:
        year = academic_year(period, day)
    first = monday(semester_start(period, year))
    return (monday(day) - first).days // 7


def date_for_week(period: Period, week: int, weekday: int, year: int) -> date:
    """
    Return the date of `weekday` (0 = Sunday) in 0-based semester `week`.
    """
    first = monday(semester_start(period, year))
    offset = 6 if weekday == 0 else weekday - 1
    return first + timedelta(weeks=week, days=offset)

"""
Schedule aggregate and query engine.

A Schedule holds the day records of one group for every fetched period and
turns them into concrete, date-bound Lesson objects.

Resolution rules for a single date (for_date):
1. holidays yield no lessons
2. dated (session) days matching the date exactly, from any period
3. the weekday-recurring day of the semester the date belongs to (sessions
   fall back to their adjacent semester), filtered by subgroup, week range
   and week parity, while the week number is within the semester
4. lessons moved away by a transfer are removed from their origin date

Every query is total: missing periods, weekdays or dates give [] or None.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ttschedule.holidays import DEFAULT_HOLIDAYS, is_holiday
from ttschedule.model import (
    DatedDay,
    EducationType,
    FullScheduleSlot,
    Holiday,
    Lesson,
    LessonTimeSlot,
    Period,
    RecurringDay,
    ScheduleDay,
    ScheduleEntry,
    SemesterWeek,
    Time,
    TransferInfo,
)
from ttschedule.periods import is_session_period, resolve_period
from ttschedule.timeslots import time_slots
from ttschedule.weeks import (
    WEEKS_PER_SEMESTER,
    academic_year,
    adjacent_semester,
    date_for_week,
    monday,
    same_weekday,
    semester_start,
    semester_weeks,
    week_number,
    weekday_index,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def entry_matches(entry: ScheduleEntry, subgroup: Optional[int] = None, week: Optional[int] = None) -> bool:
    """
    Filter rule for one entry:
    - a different subgroup is dropped (entries without a subgroup always stay)
    - with a week given, the week must be inside the entry's week range
      (unless the range is unrestricted) and match its week parity
    """
    if subgroup and entry.subgroup and entry.subgroup != subgroup:
        return False
    if week is not None:
        if not entry.weeks.unrestricted and not (entry.weeks.start <= week <= entry.weeks.end):
            return False
        if entry.week_parity:
            is_even = week % 2 == 0
            if entry.week_parity == "even" and not is_even:
                return False
            if entry.week_parity == "odd" and is_even:
                return False
    return True


def filter_slots(
    slots: Iterable[FullScheduleSlot],
    subgroup: Optional[int] = None,
    week: Optional[int] = None,
) -> Tuple[FullScheduleSlot, ...]:
    """
    Return new slots holding only the surviving entries; empty slots are dropped.
    """
    if not subgroup and week is None:
        return tuple(slots)

    out: List[FullScheduleSlot] = []
    for slot in slots:
        entries = tuple(e for e in slot.entries if entry_matches(e, subgroup, week))
        if entries:
            out.append(
                FullScheduleSlot(
                    number=slot.number,
                    time_start=slot.time_start,
                    time_end=slot.time_end,
                    entries=entries,
                )
            )
    return tuple(out)


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------


def _at(day: date, t: Time) -> datetime:
    return datetime(day.year, day.month, day.day, t.hours, t.minutes)


def make_lesson(slot: FullScheduleSlot, entry: ScheduleEntry, day: date) -> Lesson:
    """
    Build the Lesson for one entry on `day`, applying a substitution for
    that date if there is one.
    """
    room = entry.room
    teacher = entry.teacher
    original_room = None
    original_teacher = None

    for sub in entry.substitutions:
        if sub.date != day:
            continue
        if sub.room is not None:
            original_room = room
            room = sub.room
        if sub.teacher is not None:
            original_teacher = teacher
            teacher = sub.teacher
        break

    return Lesson(
        number=slot.number,
        start=_at(day, slot.time_start),
        end=_at(day, slot.time_end),
        subject=entry.subject,
        type=entry.type,
        room=room,
        teacher=teacher,
        weeks=entry.weeks,
        subgroup=entry.subgroup,
        week_parity=entry.week_parity,
        original_room=original_room,
        original_teacher=original_teacher,
        transfer=entry.transfer,
        possible_changes=entry.possible_changes,
    )


def slots_to_lessons(slots: Iterable[FullScheduleSlot], day: date) -> List[Lesson]:
    """
    Materialize every entry of `slots` on `day`.

    A transferred entry only exists on its target date.
    """
    lessons: List[Lesson] = []
    for slot in slots:
        for entry in slot.entries:
            if entry.transfer is not None and entry.transfer.target_date != day:
                continue
            lessons.append(make_lesson(slot, entry, day))
    return lessons


def sort_lessons(lessons: Iterable[Lesson]) -> List[Lesson]:
    return sorted(lessons, key=lambda lesson: lesson.start)


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


def collect_transfers(days: Iterable[ScheduleDay]) -> List[TransferInfo]:
    transfers: List[TransferInfo] = []
    for day in days:
        for slot in day.slots:
            for entry in slot.entries:
                if entry.transfer is not None:
                    transfers.append(entry.transfer)
    return transfers


def suppress_transferred(lessons: List[Lesson], transfers: Iterable[TransferInfo]) -> List[Lesson]:
    """
    Drop lessons that a transfer moved away from their (date, slot, subject).
    """
    moved: Set[Tuple[date, int, str]] = {(t.from_date, t.from_slot, t.subject) for t in transfers}
    if not moved:
        return lessons

    kept: List[Lesson] = []
    for lesson in lessons:
        key = (lesson.start.date(), lesson.number, lesson.subject)
        if lesson.transfer is None and key in moved:
            logger.debug("suppressed transferred lesson %s slot %d on %s", lesson.subject, lesson.number, key[0])
            continue
        kept.append(lesson)
    return kept


def _transferred_into(slots: Iterable[FullScheduleSlot], day: date, subgroup: Optional[int]) -> List[Lesson]:
    lessons: List[Lesson] = []
    for slot in filter_slots(slots, subgroup=subgroup):
        for entry in slot.entries:
            if entry.transfer is not None and entry.transfer.target_date == day:
                lessons.append(make_lesson(slot, entry, day))
    return lessons


def find_recurring_day(days: Iterable[ScheduleDay], weekday: int) -> Optional[RecurringDay]:
    for day in days:
        if isinstance(day, RecurringDay) and same_weekday(day.weekday, weekday):
            return day
    return None


def _dated_weekday_matches(day: DatedDay, weekday: int) -> bool:
    if day.weekday:
        return same_weekday(day.weekday, weekday)
    return weekday_index(day.date) == weekday


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


class Schedule:
    """
    Timetable of one group across academic periods.

    Per-period day lists are stored as tuples and only ever replaced as a
    whole (set_days), so a query sees either the old or the new snapshot.

    `period` pins the active period; when it is None the active period is
    derived from `clock()` on every access.
    """

    def __init__(
        self,
        group_id: int,
        schedule_map: Optional[Mapping[Period, Iterable[ScheduleDay]]] = None,
        education_type: EducationType = EducationType.HIGHER,
        holidays: Optional[Iterable[Holiday]] = None,
        period: Optional[Period] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.group_id = group_id
        self.education_type = EducationType(education_type)
        self.holidays: List[Holiday] = list(DEFAULT_HOLIDAYS if holidays is None else holidays)
        self.period = Period(period) if period is not None else None
        self._clock = clock
        self._days: Dict[Period, Tuple[ScheduleDay, ...]] = {}
        for p, days in (schedule_map or {}).items():
            self.set_days(p, days)

    # --- state ---------------------------------------------------------

    def set_days(self, period: Period, days: Iterable[ScheduleDay]) -> None:
        self._days[Period(period)] = tuple(days)

    def days(self, period: Period) -> Tuple[ScheduleDay, ...]:
        return self._days.get(Period(period), ())

    def periods(self) -> Tuple[Period, ...]:
        return tuple(self._days)

    def time_slots(self) -> List[LessonTimeSlot]:
        return time_slots(self.education_type)

    def _now(self, now: Optional[datetime] = None) -> datetime:
        return now if now is not None else self._clock()

    def active_period(self, now: Optional[datetime] = None) -> Period:
        return resolve_period(self._now(now).date(), self.period)

    @property
    def current_period(self) -> Period:
        return self.active_period()

    # --- queries -------------------------------------------------------

    def for_day(
        self,
        weekday: int,
        subgroup: Optional[int] = None,
        week: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[Lesson]:
        """
        Lessons for a weekday (0 = Sunday).

        Session: every dated day with that weekday. Semester: the weekday's
        recurring day, placed in semester `week` when given, otherwise in the
        current week.
        """
        now = self._now(now)
        period = self.active_period(now)
        days = self.days(period)

        if is_session_period(period):
            lessons: List[Lesson] = []
            for day in days:
                if isinstance(day, DatedDay) and _dated_weekday_matches(day, weekday):
                    lessons.extend(slots_to_lessons(filter_slots(day.slots, subgroup=subgroup), day.date))
            return sort_lessons(lessons)

        recurring = find_recurring_day(days, weekday)
        if recurring is None:
            return []

        slots = filter_slots(recurring.slots, subgroup=subgroup, week=week)
        if week is not None:
            target = date_for_week(period, week, weekday, academic_year(period, now.date()))
        else:
            offset = 6 if weekday == 0 else weekday - 1
            target = monday(now.date()) + timedelta(days=offset)
        return sort_lessons(slots_to_lessons(slots, target))

    def for_date(
        self,
        day: date,
        subgroup: Optional[int] = None,
        period: Optional[Period] = None,
    ) -> List[Lesson]:
        """
        All lessons taking place on `day`, sorted by start time.

        `period` overrides the pinned period and the date-based classifier.
        """
        if isinstance(day, datetime):
            day = day.date()

        if is_holiday(day, self.holidays):
            logger.debug("%s is a holiday, no lessons", day)
            return []

        lessons: List[Lesson] = []

        for days in self._days.values():
            for record in days:
                if isinstance(record, DatedDay) and record.date == day:
                    lessons.extend(slots_to_lessons(filter_slots(record.slots, subgroup=subgroup), day))

        explicit = period if period is not None else self.period
        semester = adjacent_semester(resolve_period(day, explicit))
        semester_days = self.days(semester)
        recurring = None
        if semester_days:
            week = week_number(semester, day)
            if 0 <= week <= WEEKS_PER_SEMESTER:
                recurring = find_recurring_day(semester_days, weekday_index(day))
                if recurring is not None:
                    slots = filter_slots(recurring.slots, subgroup=subgroup, week=week)
                    lessons.extend(slots_to_lessons(slots, day))

        # transfers listed under another weekday still land on their target date
        for record in semester_days:
            if not isinstance(record, RecurringDay) or record is recurring:
                continue
            lessons.extend(_transferred_into(record.slots, day, subgroup))

        lessons = suppress_transferred(lessons, collect_transfers(semester_days))
        return sort_lessons(lessons)

    def for_week(
        self,
        week: Optional[int] = None,
        subgroup: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> List[Lesson]:
        """
        Lessons from Monday to Sunday of semester `week` (semesters only),
        or of the current week.
        """
        now = self._now(now)
        period = self.active_period(now)
        if week is not None and not is_session_period(period):
            first = monday(semester_start(period, academic_year(period, now.date())))
            start = first + timedelta(weeks=week)
        else:
            start = monday(now.date())

        lessons: List[Lesson] = []
        for i in range(7):
            lessons.extend(self.for_date(start + timedelta(days=i), subgroup=subgroup))
        return sort_lessons(lessons)

    def today(self, subgroup: Optional[int] = None, now: Optional[datetime] = None) -> List[Lesson]:
        return self.for_date(self._now(now).date(), subgroup=subgroup)

    def tomorrow(self, subgroup: Optional[int] = None, now: Optional[datetime] = None) -> List[Lesson]:
        return self.for_date(self._now(now).date() + timedelta(days=1), subgroup=subgroup)

    def this_week(self, subgroup: Optional[int] = None, now: Optional[datetime] = None) -> List[Lesson]:
        return self.for_week(None, subgroup=subgroup, now=now)

    def current_lesson(self, subgroup: Optional[int] = None, now: Optional[datetime] = None) -> Optional[Lesson]:
        """
        The first lesson (in start order) whose start..end minutes contain
        the current minute, both ends inclusive.
        """
        now = self._now(now)
        minute = now.hour * 60 + now.minute
        for lesson in self.for_date(now.date(), subgroup=subgroup):
            start = lesson.start.hour * 60 + lesson.start.minute
            end = lesson.end.hour * 60 + lesson.end.minute
            if start <= minute <= end:
                return lesson
        return None

    # --- calendar delegation -------------------------------------------

    def get_week_number(self, day: Optional[date] = None) -> int:
        now = self._now()
        return week_number(self.active_period(now), day if day is not None else now.date())

    def get_semester_weeks(self, week_count: int = WEEKS_PER_SEMESTER) -> List[SemesterWeek]:
        now = self._now()
        period = self.active_period(now)
        return semester_weeks(period, academic_year(period, now.date()), week_count)

    def get_semester_start(self) -> date:
        now = self._now()
        period = self.active_period(now)
        return semester_start(period, academic_year(period, now.date()))

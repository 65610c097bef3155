"""
Central data model definitions used across the project.

This module defines the canonical structure of timetable records so that:
- the parser, the client and the query engine share the same field names
- weekday-recurring and date-keyed days are distinct types, not one shape
  with an optional date
- cached results can be turned into plain JSON-compatible dicts and back
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple, Union


class Period(IntEnum):
    """
    Academic calendar phase. Values match the ``htype`` form field of the
    timetable site.
    """

    FALL_SEMESTER = 1
    WINTER_SESSION = 2
    SPRING_SEMESTER = 3
    SUMMER_SESSION = 4


class EducationType(IntEnum):
    """Selects the lesson time table (``pertt`` form field)."""

    HIGHER = 1
    VOCATIONAL = 2


@dataclass(frozen=True)
class Time:
    hours: int
    minutes: int

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes


@dataclass(frozen=True)
class WeekRange:
    """
    Inclusive semester week numbers. ``start == 0`` means the entry is
    valid every week.
    """

    start: int = 0
    end: int = 0

    @property
    def unrestricted(self) -> bool:
        return self.start <= 0


@dataclass(frozen=True)
class Teacher:
    name: str = ""
    position: Optional[str] = None
    degree: Optional[str] = None


@dataclass(frozen=True)
class Substitution:
    """One-off room and/or teacher change for a single date."""

    date: date
    room: Optional[str] = None
    teacher: Optional[Teacher] = None


@dataclass(frozen=True)
class TransferInfo:
    """
    Marks an entry as moved: the lesson normally held at
    (from_date, from_slot) takes place on target_date instead.
    """

    target_date: date
    from_date: date
    from_slot: int
    subject: str


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One subject occurrence within a slot.
    """

    subject: str
    room: str = ""
    type: str = ""
    weeks: WeekRange = WeekRange()
    teacher: Teacher = Teacher()
    subgroup: Optional[int] = None
    week_parity: Optional[str] = None  # "even" | "odd"
    substitutions: Tuple[Substitution, ...] = ()
    transfer: Optional[TransferInfo] = None
    possible_changes: bool = False


@dataclass(frozen=True)
class FullScheduleSlot:
    number: int
    time_start: Time
    time_end: Time
    entries: Tuple[ScheduleEntry, ...] = ()


@dataclass(frozen=True)
class RecurringDay:
    """A weekday of the semester grid, repeated every week."""

    weekday: str
    slots: Tuple[FullScheduleSlot, ...] = ()


@dataclass(frozen=True)
class DatedDay:
    """A single calendar date of the session grid."""

    date: date
    weekday: str = ""
    slots: Tuple[FullScheduleSlot, ...] = ()


ScheduleDay = Union[RecurringDay, DatedDay]


@dataclass(frozen=True)
class Lesson:
    """
    Represents one concrete lesson: a schedule entry materialized on a date.

    Lessons are computed on query and never stored.
    """

    number: int
    start: datetime
    end: datetime
    subject: str
    type: str
    room: str
    teacher: Teacher
    weeks: WeekRange
    subgroup: Optional[int] = None
    week_parity: Optional[str] = None
    original_room: Optional[str] = None
    original_teacher: Optional[Teacher] = None
    transfer: Optional[TransferInfo] = None
    possible_changes: bool = False


@dataclass(frozen=True)
class SemesterWeek:
    week: int
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Holiday:
    month: int
    day: int
    name: str


@dataclass(frozen=True)
class LessonTimeSlot:
    number: int
    start: Time
    end: Time


@dataclass(frozen=True)
class Faculty:
    id: int
    name: str


@dataclass(frozen=True)
class Group:
    id: int
    name: str


# ---------------------------------------------------------------------------
# Plain dict conversion (cache snapshots must be JSON-compatible)
# ---------------------------------------------------------------------------


def _time_to_str(t: Time) -> str:
    return f"{t.hours:02d}:{t.minutes:02d}"


def _time_from_str(s: str) -> Time:
    hours, _, minutes = s.partition(":")
    return Time(int(hours or 0), int(minutes or 0))


def _teacher_to_dict(t: Teacher) -> Dict[str, Any]:
    return {"name": t.name, "position": t.position, "degree": t.degree}


def _teacher_from_dict(d: Dict[str, Any]) -> Teacher:
    return Teacher(name=d.get("name", ""), position=d.get("position"), degree=d.get("degree"))


def _entry_to_dict(e: ScheduleEntry) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "subject": e.subject,
        "room": e.room,
        "type": e.type,
        "weeks": [e.weeks.start, e.weeks.end],
        "teacher": _teacher_to_dict(e.teacher),
        "subgroup": e.subgroup,
        "week_parity": e.week_parity,
        "possible_changes": e.possible_changes,
    }
    if e.substitutions:
        out["substitutions"] = [
            {
                "date": s.date.isoformat(),
                "room": s.room,
                "teacher": _teacher_to_dict(s.teacher) if s.teacher else None,
            }
            for s in e.substitutions
        ]
    if e.transfer:
        out["transfer"] = {
            "target_date": e.transfer.target_date.isoformat(),
            "from_date": e.transfer.from_date.isoformat(),
            "from_slot": e.transfer.from_slot,
            "subject": e.transfer.subject,
        }
    return out


def _entry_from_dict(d: Dict[str, Any]) -> ScheduleEntry:
    weeks = d.get("weeks") or [0, 0]
    subs: List[Substitution] = []
    for s in d.get("substitutions") or []:
        teacher = s.get("teacher")
        subs.append(
            Substitution(
                date=date.fromisoformat(s["date"]),
                room=s.get("room"),
                teacher=_teacher_from_dict(teacher) if teacher else None,
            )
        )
    transfer = None
    t = d.get("transfer")
    if t:
        transfer = TransferInfo(
            target_date=date.fromisoformat(t["target_date"]),
            from_date=date.fromisoformat(t["from_date"]),
            from_slot=int(t["from_slot"]),
            subject=t["subject"],
        )
    return ScheduleEntry(
        subject=d.get("subject", ""),
        room=d.get("room", ""),
        type=d.get("type", ""),
        weeks=WeekRange(int(weeks[0]), int(weeks[1])),
        teacher=_teacher_from_dict(d.get("teacher") or {}),
        subgroup=d.get("subgroup"),
        week_parity=d.get("week_parity"),
        substitutions=tuple(subs),
        transfer=transfer,
        possible_changes=bool(d.get("possible_changes", False)),
    )


def day_to_dict(day: ScheduleDay) -> Dict[str, Any]:
    """
    Convert a day record into a JSON-compatible dict.
    """
    out: Dict[str, Any] = {
        "weekday": day.weekday,
        "slots": [
            {
                "number": slot.number,
                "time_start": _time_to_str(slot.time_start),
                "time_end": _time_to_str(slot.time_end),
                "entries": [_entry_to_dict(e) for e in slot.entries],
            }
            for slot in day.slots
        ],
    }
    if isinstance(day, DatedDay):
        out["date"] = day.date.isoformat()
    return out


def day_from_dict(d: Dict[str, Any]) -> ScheduleDay:
    """
    Inverse of day_to_dict. A "date" key selects the DatedDay variant.
    """
    slots = tuple(
        FullScheduleSlot(
            number=int(s["number"]),
            time_start=_time_from_str(s.get("time_start", "00:00")),
            time_end=_time_from_str(s.get("time_end", "00:00")),
            entries=tuple(_entry_from_dict(e) for e in s.get("entries", [])),
        )
        for s in d.get("slots", [])
    )
    if d.get("date"):
        return DatedDay(date=date.fromisoformat(d["date"]), weekday=d.get("weekday", ""), slots=slots)
    return RecurringDay(weekday=d.get("weekday", ""), slots=slots)

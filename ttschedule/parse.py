"""
Parsing (HTML -> day records).

The timetable site serves two layouts for a group page:
- semester: rows grouped under weekday header rows, one row per numbered
  slot ("3 пара (11:40 - 13:00)"), recurring every week
- session: one row per calendar date, cell ids like "trd20251224", each
  entry carrying its own time range

parse_full_schedule() detects the layout and returns RecurringDay or
DatedDay records. The small field parsers (time, weeks, teacher, parity)
are public because the client and tests use them directly.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from ttschedule.errors import ParseError
from ttschedule.model import (
    DatedDay,
    EducationType,
    Faculty,
    FullScheduleSlot,
    Group,
    Period,
    RecurringDay,
    ScheduleDay,
    ScheduleEntry,
    Teacher,
    Time,
    WeekRange,
)
from ttschedule.periods import period_from_label
from ttschedule.timeslots import lesson_number


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_TYPE_RE = re.compile(r"\((лк|пр|лб|зач|экз|зчО|кр|конс)\)")
_SESSION_TYPE_RE = re.compile(r"\((лк|пр|лб|зач|экз|зчО|кр|конс\.?)\)", re.I)
_WEEKS_RE = re.compile(r"\(([^)]*нед\.?[^)]*)\)")
_ROOM_RE = re.compile(r"(?:<sup>[^<]*</sup>)?([А-Яа-яA-Za-z]-\d+)")
_TEACHER_RE = re.compile(r"<br\s*/?>\s*([^<]+?)(?:<br|</td|<i|$)")
_SUBGROUP_RE = re.compile(r"(\d+)\s*подгруппа")
_PARITY_RE = re.compile(r"<sup>\s*(\*{1,2})\s*</sup>")
_SLOT_NUMBER_RE = re.compile(r"(\d+)\s*пара")
_SLOT_TIME_RE = re.compile(r"\((\d{2}:\d{2})\s*-\s*(\d{2}:\d{2})\)")
_SESSION_TIME_RE = re.compile(r"<br\s*/?>\s*(\d{2}:\d{2})\s*-\s*(\d{2}:\d{2})")
_SESSION_ROOM_RE = re.compile(r"^([^<]*?)\s*<span")
_SESSION_ID_RE = re.compile(r"trd(\d{4})(\d{2})(\d{2})")
_BR_TAIL_RE = re.compile(r"<br\s*/?>\s*(.+)", re.I | re.S)
_POSITION_RE = re.compile(r"^(доц\.|проф\.|ст\.преп\.|ст\. преп\.|преп\.|асс\.)\s*")
_DEGREE_RE = re.compile(r"^([кд]\.[а-яё.-]+н\.)\s*")
_BUTTON_ID_RE = re.compile(r"val\((\d+)\)")
_PERIOD_BANNER_RE = re.compile(r"идет\s+(.+?)\s*<", re.I)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _text(el: Optional[Tag]) -> str:
    return el.get_text(strip=True) if el is not None else ""


def parse_time(s: str) -> Time:
    """
    Parse "HH:MM" into a Time. Missing parts become 0.
    """
    parts = s.strip().split(":")
    try:
        hours = int(parts[0]) if parts and parts[0] else 0
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return Time(0, 0)
    return Time(hours, minutes)


def parse_weeks(s: str) -> WeekRange:
    """
    "2 нед." -> 2..2, "6 - 8 нед." -> 6..8, anything else -> unrestricted.
    """
    m = re.search(r"(\d+)\s*-\s*(\d+)", s)
    if m:
        return WeekRange(int(m.group(1)), int(m.group(2)))
    m = re.search(r"(\d+)", s)
    if m:
        return WeekRange(int(m.group(1)), int(m.group(1)))
    return WeekRange(0, 0)


def parse_week_parity(html: str) -> Optional[str]:
    """
    <sup>*</sup> marks odd weeks, <sup>**</sup> even weeks.
    """
    m = _PARITY_RE.search(html)
    if not m:
        return None
    return "even" if m.group(1) == "**" else "odd"


def parse_teacher(s: str) -> Teacher:
    """
    Split an academic position and degree prefix off a teacher name, e.g.
    "доц. к.т.н. Иванов И.И." -> position "доц.", degree "к.т.н.".
    """
    rest = s.strip()
    if not rest:
        return Teacher()

    position = None
    m = _POSITION_RE.match(rest)
    if m:
        position = m.group(1)
        rest = rest[m.end():]

    degree = None
    m = _DEGREE_RE.match(rest)
    if m:
        degree = m.group(1)
        rest = rest[m.end():]

    return Teacher(name=rest.strip(), position=position, degree=degree)


# ---------------------------------------------------------------------------
# Semester layout
# ---------------------------------------------------------------------------


def _parse_semester_entry(row: Tag) -> Optional[ScheduleEntry]:
    td = row.find("td") or row
    html = td.decode_contents()
    plain = td.get_text(" ", strip=True)
    if not plain:
        return None

    subject = _text(td.select_one('span[style*="color: blue"]'))
    if not subject:
        return None

    type_m = _TYPE_RE.search(plain)
    weeks_m = _WEEKS_RE.search(plain)
    room_m = _ROOM_RE.search(html)
    teacher_m = _TEACHER_RE.search(html)
    subgroup_m = _SUBGROUP_RE.search(plain)
    classes = (row.get("class") or []) + (td.get("class") or [])

    return ScheduleEntry(
        subject=subject,
        room=room_m.group(1) if room_m else "",
        type=type_m.group(1) if type_m else "",
        weeks=parse_weeks(weeks_m.group(1) if weeks_m else ""),
        teacher=parse_teacher(teacher_m.group(1) if teacher_m else ""),
        subgroup=int(subgroup_m.group(1)) if subgroup_m else None,
        week_parity=parse_week_parity(html),
        possible_changes="want" in classes,
    )


def _parse_semester(soup: BeautifulSoup) -> List[ScheduleDay]:
    days: List[ScheduleDay] = []
    weekday: Optional[str] = None
    slots: List[FullScheduleSlot] = []

    def flush() -> None:
        if weekday is not None:
            days.append(RecurringDay(weekday=weekday, slots=tuple(slots)))

    for row in soup.find_all("tr"):
        style = row.get("style") or ""
        classes = row.get("class") or []

        # Weekday header row
        if "lightgray" in style and "trfd" in classes:
            name = _text(row.find("td"))
            if name:
                flush()
                weekday = name
                slots = []
            continue

        if weekday is None:
            continue

        time_cell = row.select_one("td.trf")
        data_cell = row.select_one("td.trdata:not(.trf)")
        if time_cell is None or data_cell is None:
            continue

        time_div = time_cell.select_one(".trfd")
        if time_div is None:
            continue

        time_text = _text(time_div)
        number_m = _SLOT_NUMBER_RE.search(time_text)
        if not number_m:
            continue
        time_m = _SLOT_TIME_RE.search(time_text)

        entries = []
        for entry_row in data_cell.select("table tr"):
            entry = _parse_semester_entry(entry_row)
            if entry:
                entries.append(entry)

        slots.append(
            FullScheduleSlot(
                number=int(number_m.group(1)),
                time_start=parse_time(time_m.group(1) if time_m else "00:00"),
                time_end=parse_time(time_m.group(2) if time_m else "00:00"),
                entries=tuple(entries),
            )
        )

    flush()
    return days


# ---------------------------------------------------------------------------
# Session layout
# ---------------------------------------------------------------------------


def _parse_session_entry(td: Tag) -> Optional[Tuple[ScheduleEntry, Time, Time]]:
    html = td.decode_contents().strip()
    plain = td.get_text(" ", strip=True)
    if not plain:
        return None

    subject = _text(td.select_one('span[style*="color: blue"]'))
    if not subject:
        return None

    time_m = _SESSION_TIME_RE.search(html)
    if not time_m:
        return None

    room_m = _SESSION_ROOM_RE.search(html)
    type_m = _SESSION_TYPE_RE.search(plain)

    entry = ScheduleEntry(
        subject=subject,
        room=room_m.group(1).strip() if room_m else "",
        type=type_m.group(1).rstrip(".").lower() if type_m else "",
    )
    return entry, parse_time(time_m.group(1)), parse_time(time_m.group(2))


def _parse_session(soup: BeautifulSoup, education_type: EducationType) -> List[ScheduleDay]:
    days: List[ScheduleDay] = []

    for date_cell in soup.select('td[id^="trd2"]'):
        m = _SESSION_ID_RE.search(date_cell.get("id", ""))
        if not m:
            continue
        try:
            day = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            continue

        br_m = _BR_TAIL_RE.search(date_cell.decode_contents())
        weekday = BeautifulSoup(br_m.group(1), "html.parser").get_text(strip=True) if br_m else ""

        row = date_cell.parent
        if row is None:
            continue
        data_cell = row.select_one("td.trdata:not(.trfd)")
        if data_cell is None:
            continue

        # slots keyed by (number, start, end); parallel entries share a slot
        slots: Dict[Tuple[int, Time, Time], List[ScheduleEntry]] = {}
        for entry_row in data_cell.select("table tr"):
            td = entry_row.find("td") or entry_row
            parsed = _parse_session_entry(td)
            if parsed is None:
                continue
            entry, start, end = parsed
            key = (lesson_number(start, education_type), start, end)
            slots.setdefault(key, []).append(entry)

        if slots:
            days.append(
                DatedDay(
                    date=day,
                    weekday=weekday,
                    slots=tuple(
                        FullScheduleSlot(number=n, time_start=s, time_end=e, entries=tuple(entries))
                        for (n, s, e), entries in slots.items()
                    ),
                )
            )

    return days


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_full_schedule(html: str, education_type: EducationType = EducationType.HIGHER) -> List[ScheduleDay]:
    """
    Parse a group timetable page of either layout.

    Raises ParseError when the page has no table rows at all (an error or
    login page rather than a timetable).
    """
    if not html or not html.strip():
        raise ParseError("empty timetable page")

    soup = BeautifulSoup(html, "html.parser")
    if soup.find("tr") is None:
        raise ParseError("timetable page has no table rows")

    if soup.select_one('td[id^="trd2"]') is not None:
        return _parse_session(soup, education_type)
    return _parse_semester(soup)


def parse_period_label(html: str) -> Optional[Period]:
    """
    Read the active period from the "идет <period>" banner, if present.
    """
    m = _PERIOD_BANNER_RE.search(html)
    if not m:
        return None
    return period_from_label(m.group(1))


def _button_ids(soup: BeautifulSoup, selector: str) -> List[Tuple[int, Tag]]:
    out: List[Tuple[int, Tag]] = []
    for btn in soup.select(selector):
        m = _BUTTON_ID_RE.search(btn.get("onclick", ""))
        if m:
            out.append((int(m.group(1)), btn))
    return out


def parse_faculty_buttons(html: str) -> List[Faculty]:
    soup = BeautifulSoup(html, "html.parser")
    return [Faculty(id=i, name=_text(btn)) for i, btn in _button_ids(soup, ".facbut")]


def parse_group_buttons(html: str) -> List[Group]:
    soup = BeautifulSoup(html, "html.parser")
    return [Group(id=i, name=btn.get("value") or _text(btn)) for i, btn in _button_ids(soup, "button[id^='gr']")]


def parse_teacher_buttons(html: str) -> List[Tuple[int, str]]:
    soup = BeautifulSoup(html, "html.parser")
    return [(i, btn.get("value") or _text(btn)) for i, btn in _button_ids(soup, ".techbut")]

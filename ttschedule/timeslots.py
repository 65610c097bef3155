"""
Fixed lesson time tables.

Higher education and vocational education groups use different bell
schedules; the education type picks the table.
"""

from __future__ import annotations

from typing import List

from ttschedule.model import EducationType, LessonTimeSlot, Time

HIGHER_TIME_SLOTS: List[LessonTimeSlot] = [
    LessonTimeSlot(1, Time(8, 20), Time(9, 40)),
    LessonTimeSlot(2, Time(9, 50), Time(11, 10)),
    LessonTimeSlot(3, Time(11, 40), Time(13, 0)),
    LessonTimeSlot(4, Time(13, 30), Time(14, 50)),
    LessonTimeSlot(5, Time(15, 0), Time(16, 20)),
    LessonTimeSlot(6, Time(16, 40), Time(18, 0)),
    LessonTimeSlot(7, Time(18, 10), Time(19, 30)),
    LessonTimeSlot(8, Time(19, 40), Time(21, 0)),
]

VOCATIONAL_TIME_SLOTS: List[LessonTimeSlot] = [
    LessonTimeSlot(1, Time(8, 10), Time(9, 40)),
    LessonTimeSlot(2, Time(9, 55), Time(11, 25)),
    LessonTimeSlot(3, Time(11, 55), Time(13, 25)),
    LessonTimeSlot(4, Time(13, 40), Time(15, 10)),
    LessonTimeSlot(5, Time(15, 25), Time(16, 55)),
    LessonTimeSlot(6, Time(17, 10), Time(18, 40)),
    LessonTimeSlot(7, Time(18, 55), Time(20, 25)),
]


def time_slots(education_type: EducationType) -> List[LessonTimeSlot]:
    if education_type == EducationType.VOCATIONAL:
        return VOCATIONAL_TIME_SLOTS
    return HIGHER_TIME_SLOTS


def lesson_number(t: Time, education_type: EducationType = EducationType.HIGHER) -> int:
    """
    Return the number of the slot whose start time is closest to `t`.
    On a tie the earlier slot wins.
    """
    slots = time_slots(education_type)
    target = t.total_minutes
    closest = min(slots, key=lambda s: abs(s.start.total_minutes - target))
    return closest.number

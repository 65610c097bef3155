"""
ttschedule - university timetable client and schedule resolution engine.
"""

from pathlib import Path

from ttschedule.cache import NEVER, ResultCache
from ttschedule.client import TtClient
from ttschedule.errors import AuthError, FetchError, ParseError, TtError
from ttschedule.model import EducationType, Lesson, Period
from ttschedule.schedule import Schedule

__version__ = (Path(__file__).resolve().parent / "VERSION").read_text(encoding="utf-8").strip()

__all__ = [
    "AuthError",
    "EducationType",
    "FetchError",
    "Lesson",
    "NEVER",
    "ParseError",
    "Period",
    "ResultCache",
    "Schedule",
    "TtClient",
    "TtError",
]

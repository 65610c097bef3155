"""
Failure types raised by the fetch and parse layers.

The query engine itself never raises; these exist so that "no lessons"
is never confused with "the timetable could not be retrieved".
"""

from __future__ import annotations


class TtError(Exception):
    """Base class for timetable retrieval failures."""


class AuthError(TtError):
    """Login or guest login was rejected."""


class FetchError(TtError):
    """Network failure, timeout or unexpected HTTP status."""


class ParseError(TtError):
    """A page did not have the expected structure."""

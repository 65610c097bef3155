"""
HTTP client for the timetable site.

- keeps cookies in a requests.Session (guest or account login)
- fetches and parses group timetables, faculties and groups
- wraps fetches in a ResultCache so repeated runs can skip the network
- builds Schedule aggregates for a group

Network and HTTP failures are raised as FetchError, rejected logins as
AuthError, unexpected pages as ParseError.
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, TypeVar, Union

import requests

from ttschedule import config
from ttschedule.cache import ResultCache
from ttschedule.errors import AuthError, FetchError, ParseError
from ttschedule.model import (
    EducationType,
    Faculty,
    Group,
    Holiday,
    Period,
    ScheduleDay,
    day_from_dict,
    day_to_dict,
)
from ttschedule.parse import (
    parse_faculty_buttons,
    parse_full_schedule,
    parse_group_buttons,
    parse_period_label,
    parse_teacher_buttons,
)
from ttschedule.schedule import Schedule

logger = logging.getLogger(__name__)

CacheOption = Union[None, float, Mapping[str, Optional[float]], ResultCache]

T = TypeVar("T")


def _build_cache(cache: CacheOption) -> Optional[ResultCache]:
    if cache is None or isinstance(cache, ResultCache):
        return cache
    if isinstance(cache, (int, float)):
        return ResultCache.uniform(cache)
    return ResultCache(cache)


class TtClient:
    """
    Client for one timetable site session.

    `cache` may be a TTL in milliseconds applied to every category, a
    mapping of category -> TTL, a ready ResultCache, or None (no caching).

    With `auto_guest_login` the client logs in as a guest right before its
    first request, so runs answered entirely from the cache stay offline.
    """

    def __init__(
        self,
        education_type: Optional[EducationType] = None,
        cache: CacheOption = None,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        auto_guest_login: bool = False,
    ) -> None:
        self.education_type = EducationType(education_type if education_type is not None else config.EDUCATION_TYPE)
        self.cache = _build_cache(cache)
        self.session = session if session is not None else requests.Session()
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT
        self.auto_guest_login = auto_guest_login
        self._logged_in = False

    @property
    def pertt(self) -> str:
        return str(int(self.education_type))

    # -----------------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, str]] = None,
        allow_redirects: bool = True,
    ) -> requests.Response:
        if self.auto_guest_login and not self._logged_in and path != "/auth":
            self.login_as_guest()

        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method,
                url,
                data=data,
                timeout=self.timeout,
                allow_redirects=allow_redirects,
            )
        except requests.RequestException as e:
            raise FetchError(f"{method} {url} failed: {e}") from e

        if allow_redirects:
            try:
                resp.raise_for_status()
            except requests.HTTPError as e:
                raise FetchError(f"{method} {url} returned {resp.status_code}") from e
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return resp

    def _get(self, path: str) -> str:
        return self._request("GET", path).text

    def _post(self, path: str, data: Dict[str, str]) -> str:
        return self._request("POST", path, data=data).text

    # -----------------------------------------------------------------------
    # Cache
    # -----------------------------------------------------------------------

    def _cache_get(self, category: str, key: str) -> Optional[Any]:
        return self.cache.get(category, key) if self.cache is not None else None

    def _cache_load(self, category: str, key: str, decode: Callable[[Any], T]) -> Optional[T]:
        """
        Decode a cached record; a damaged record counts as a miss.
        """
        cached = self._cache_get(category, key)
        if cached is None:
            return None
        try:
            return decode(cached)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("ignoring damaged cache entry %s:%s: %r", category, key, e)
            return None

    def _cache_set(self, category: str, key: str, data: Any) -> None:
        if self.cache is not None:
            self.cache.set(category, key, data)

    def clear_cache(self, category: Optional[str] = None) -> None:
        if self.cache is not None:
            self.cache.clear(category)

    def export_cache(self) -> Dict[str, Dict[str, Any]]:
        return self.cache.export() if self.cache is not None else {}

    def import_cache(self, snapshot: Mapping[str, Mapping[str, Any]]) -> None:
        if self.cache is not None:
            self.cache.import_(snapshot)

    # -----------------------------------------------------------------------
    # Auth
    # -----------------------------------------------------------------------

    def login(self, email: str, password: str) -> None:
        resp = self._request(
            "POST",
            "/auth",
            data={
                "wname": email,
                "wpass": password,
                "wauto": "1",
                "auth": "Войти",
                "hfac": "0",
                "pertt": self.pertt,
            },
            allow_redirects=False,
        )
        if resp.status_code != 302:
            raise AuthError(f"login failed (HTTP {resp.status_code})")
        self._logged_in = True

    def login_as_guest(self) -> None:
        resp = self._request(
            "POST",
            "/auth",
            data={"guest": "Войти гостем", "hfac": "0", "pertt": self.pertt},
            allow_redirects=False,
        )
        if resp.status_code != 302:
            raise AuthError(f"guest login failed (HTTP {resp.status_code})")
        self._logged_in = True

    # -----------------------------------------------------------------------
    # Schedule
    # -----------------------------------------------------------------------

    def get_group_schedule(self, group_id: int, period: Optional[Period] = None) -> List[ScheduleDay]:
        """
        Fetch and parse the timetable of a group. Without `period` the site
        serves whatever period is currently active.
        """
        key = f"{group_id}:{int(period) if period is not None else 0}"
        cached = self._cache_load("schedule", key, lambda data: [day_from_dict(d) for d in data])
        if cached is not None:
            return cached

        path = f"/index/grouptt/gr/{group_id}"
        if period is not None:
            body = self._post(path, {"htype": str(int(period))})
        else:
            body = self._get(path)

        days = parse_full_schedule(body, self.education_type)
        logger.debug("group %s period %s: %d day records", group_id, period, len(days))
        self._cache_set("schedule", key, [day_to_dict(d) for d in days])
        return days

    def get_current_period(self, group_id: int) -> Optional[Period]:
        """
        Period the site reports as active for a group, or None if the page
        shows no banner.
        """
        key = str(group_id)
        cached = self._cache_load("currentPeriod", key, Period)
        if cached is not None:
            return cached

        period = parse_period_label(self._get(f"/index/grouptt/gr/{group_id}"))
        if period is not None:
            self._cache_set("currentPeriod", key, int(period))
        return period

    def load_schedule(
        self,
        group_id: int,
        periods: Optional[Iterable[Period]] = None,
        holidays: Optional[Iterable[Holiday]] = None,
        period: Optional[Period] = None,
    ) -> Schedule:
        """
        Build a Schedule for a group, fetching every requested period
        (all four by default).
        """
        schedule = Schedule(
            group_id,
            education_type=self.education_type,
            holidays=holidays,
            period=period,
        )
        for p in periods if periods is not None else list(Period):
            self.refresh(schedule, p)
        return schedule

    def refresh(self, schedule: Schedule, period: Period) -> None:
        """
        Re-fetch one period and replace its day records in `schedule`.
        """
        schedule.set_days(period, self.get_group_schedule(schedule.group_id, period))

    # -----------------------------------------------------------------------
    # Search / discovery
    # -----------------------------------------------------------------------

    def get_faculties(self) -> List[Faculty]:
        cached = self._cache_load("faculties", "all", lambda data: [Faculty(**f) for f in data])
        if cached is not None:
            return cached

        faculties = parse_faculty_buttons(self._get("/"))
        self._cache_set("faculties", "all", [{"id": f.id, "name": f.name} for f in faculties])
        return faculties

    def get_groups_for_faculty(self, faculty_id: int) -> List[Group]:
        key = str(faculty_id)
        cached = self._cache_load("groups", key, lambda data: [Group(**g) for g in data])
        if cached is not None:
            return cached

        groups = parse_group_buttons(self._post("/", {"hfac": str(faculty_id), "pertt": self.pertt}))
        self._cache_set("groups", key, [{"id": g.id, "name": g.name} for g in groups])
        return groups

    def search_group(self, name: str) -> List[Group]:
        body = self._post("/", {"grname": name, "findgr": "найти", "hfac": "0", "pertt": self.pertt})
        return parse_group_buttons(body)

    def search_teacher(self, name: str) -> List[Tuple[int, str]]:
        body = self._post("/", {"techname": name, "findtech": "найти", "hfac": "0", "pertt": self.pertt})
        return parse_teacher_buttons(body)

    # -----------------------------------------------------------------------
    # Server clock
    # -----------------------------------------------------------------------

    def get_server_time(self) -> datetime:
        """
        Current time according to the server's Date header (timezone-aware).
        """
        resp = self._request("HEAD", "/")
        header = resp.headers.get("Date")
        if not header:
            raise ParseError("response has no Date header")
        try:
            return parsedate_to_datetime(header)
        except (TypeError, ValueError) as e:
            raise ParseError(f"invalid Date header: {header!r}") from e

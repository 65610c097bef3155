"""
Result cache for fetched timetable data.

Entries are grouped by category ("schedule", "faculties", "groups",
"currentPeriod"), each category with its own TTL in milliseconds:
- a category missing from the configuration is not cached at all
- NEVER (math.inf) disables expiry for a category
- expired entries are removed lazily on `get`
- `set` and `get` copy the data, so callers never share it with the store

The whole store can be exported as a plain dict and imported again, so a
process can persist it between runs (see storage.py). Timestamps are kept
as-is on import, so expiry continues where it left off.
"""

from __future__ import annotations

import copy
import logging
import math
import time
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

NEVER = math.inf

CATEGORIES = ("schedule", "faculties", "groups", "currentPeriod")


def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


class ResultCache:
    """
    Category-scoped TTL store.

    `clock` returns seconds since the epoch (defaults to time.time) and can
    be replaced in tests.
    """

    def __init__(
        self,
        ttls: Mapping[str, Optional[float]],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttls: Dict[str, float] = {k: v for k, v in ttls.items() if v is not None}
        self._clock = clock
        self._store: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def uniform(cls, ttl: float, clock: Callable[[], float] = time.time) -> "ResultCache":
        """
        Build a cache with the same TTL for every known category.
        """
        return cls({c: ttl for c in CATEGORIES}, clock=clock)

    def enabled(self, category: str) -> bool:
        return category in self._ttls

    def get(self, category: str, key: str) -> Optional[Any]:
        """
        Return cached data, or None on a miss (unknown category, missing
        or expired entry).
        """
        ttl = self._ttls.get(category)
        if ttl is None:
            return None

        full_key = f"{category}:{key}"
        entry = self._store.get(full_key)
        if entry is None:
            logger.debug("cache miss %s", full_key)
            return None

        if ttl != NEVER and _now_ms(self._clock) - entry["timestamp"] > ttl:
            logger.debug("cache expired %s", full_key)
            del self._store[full_key]
            return None

        logger.debug("cache hit %s", full_key)
        return copy.deepcopy(entry["data"])

    def set(self, category: str, key: str, data: Any) -> None:
        if category not in self._ttls:
            return
        self._store[f"{category}:{key}"] = {"data": copy.deepcopy(data), "timestamp": _now_ms(self._clock)}

    def clear(self, category: Optional[str] = None) -> None:
        if not category:
            self._store.clear()
            return
        prefix = f"{category}:"
        for key in [k for k in self._store if k.startswith(prefix)]:
            del self._store[key]

    def export(self) -> Dict[str, Dict[str, Any]]:
        """
        Return every entry as {"<category>:<key>": {"data": ..., "timestamp": ms}}.
        """
        return {k: {"data": copy.deepcopy(v["data"]), "timestamp": v["timestamp"]} for k, v in self._store.items()}

    def import_(self, snapshot: Mapping[str, Mapping[str, Any]]) -> None:
        """
        Load a snapshot produced by export(), overwriting matching keys.
        Malformed records are skipped.
        """
        loaded = 0
        for key, entry in snapshot.items():
            if not isinstance(entry, Mapping) or "timestamp" not in entry:
                continue
            self._store[key] = {"data": entry.get("data"), "timestamp": entry["timestamp"]}
            loaded += 1
        logger.debug("imported %d cache entries", loaded)

    def __len__(self) -> int:
        return len(self._store)

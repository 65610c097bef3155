"""
Persistent storage for the result cache.

This module manages the snapshot file (by default data/cache.json inside
the package, see config.CACHE_FILE):

    {"<category>:<key>": {"data": ..., "timestamp": <ms>}, ...}

Design rationale:
- the cache itself lives in memory (cache.py)
- the snapshot lets the next run reuse fetched timetables, faculties and
  groups without hitting the site again
- timestamps are stored unchanged, so expiry carries over between runs
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from ttschedule import config

logger = logging.getLogger(__name__)


def _default_cache_path() -> Path:
    """
    Return the configured snapshot path.

    Using a function instead of a constant makes testing easier,
    because tests can override the path.
    """
    return config.CACHE_FILE


def load_cache_snapshot(path: str | Path | None = None) -> Dict[str, Dict[str, Any]]:
    """
    Load a cache snapshot.

    Returns an empty dict if the file does not exist or is invalid, so a
    broken snapshot only costs a refetch.
    """
    snapshot_path = Path(path) if path is not None else _default_cache_path()

    # First run: nothing cached yet
    if not snapshot_path.exists():
        return {}

    try:
        data = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("ignoring unreadable cache snapshot %s: %s", snapshot_path, e)
        return {}

    if not isinstance(data, dict):
        return {}

    out: Dict[str, Dict[str, Any]] = {}
    for key, entry in data.items():
        if isinstance(key, str) and isinstance(entry, dict) and "timestamp" in entry:
            out[key] = entry
    return out


def save_cache_snapshot(snapshot: Mapping[str, Mapping[str, Any]], path: str | Path | None = None) -> None:
    """
    Save a cache snapshot as JSON. Creates parent directories if needed.
    """
    snapshot_path = Path(path) if path is not None else _default_cache_path()
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {k: {"data": v.get("data"), "timestamp": v.get("timestamp")} for k, v in snapshot.items()}
    snapshot_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("saved %d cache entries to %s", len(payload), snapshot_path)

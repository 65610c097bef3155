import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent

# Timetable site
BASE_URL = os.getenv("TT_BASE_URL", "https://tt.chuvsu.ru").rstrip("/")

# Timeouts (seconds)
HTTP_TIMEOUT = float(os.getenv("TT_HTTP_TIMEOUT", "30"))

# 1 = higher education, 2 = vocational education
EDUCATION_TYPE = int(os.getenv("TT_EDUCATION_TYPE", "1"))

# Persisted cache snapshot
CACHE_FILE = Path(os.getenv("TT_CACHE_FILE", str(PACKAGE_DIR / "data" / "cache.json")))

# Cache TTLs (milliseconds, inf = never expire)
SCHEDULE_TTL_MS = 60 * 60 * 1000  # 1 hour
FACULTIES_TTL_MS = float("inf")
GROUPS_TTL_MS = float("inf")
CURRENT_PERIOD_TTL_MS = 60 * 60 * 1000

DEFAULT_CACHE_TTLS = {
    "schedule": SCHEDULE_TTL_MS,
    "faculties": FACULTIES_TTL_MS,
    "groups": GROUPS_TTL_MS,
    "currentPeriod": CURRENT_PERIOD_TTL_MS,
}

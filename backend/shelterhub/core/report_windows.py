"""Report Windows — trailing time windows and derived rates for the admin dashboard.

Invariants:
    - All windows are computed from one `now`, so sub-statistics agree on their bounds
    - average_per_day(0, n) == 0.0 exactly; otherwise count / n
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

ACTIVITY_WINDOW_DAYS = 30
NEW_USER_WINDOW_DAYS = 7
RECENT_ACTIVITY_HOURS = 24

RECENT_USERS_LIMIT = 5
ACTIVE_GROUPS_LIMIT = 5
ATTENTION_ANIMALS_LIMIT = 10


@dataclass(frozen=True)
class ReportWindows:
    now: datetime
    last_24h: datetime
    last_7_days: datetime
    last_30_days: datetime


def report_windows(now: datetime | None = None) -> ReportWindows:
    now = now or datetime.now(timezone.utc)
    return ReportWindows(
        now=now,
        last_24h=now - timedelta(hours=RECENT_ACTIVITY_HOURS),
        last_7_days=now - timedelta(days=NEW_USER_WINDOW_DAYS),
        last_30_days=now - timedelta(days=ACTIVITY_WINDOW_DAYS),
    )


def average_per_day(count: int, days: int = ACTIVITY_WINDOW_DAYS) -> float:
    if count <= 0 or days <= 0:
        return 0.0
    return count / days

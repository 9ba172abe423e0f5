"""Time windows selecting which marketplace orders a pass considers."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from zoneinfo import ZoneInfo


class SyncWindow(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class WindowRange:
    start: datetime
    end: datetime
    label: str


def resolve_window(
    window: SyncWindow, tz: str = "UTC", now: datetime | None = None
) -> WindowRange:
    """Resolve a window to a concrete range ending at ``now``.

    Day, week (from Monday) and month boundaries are local midnights in ``tz``.
    """
    zone = ZoneInfo(tz)
    now = now.astimezone(zone) if now else datetime.now(zone)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if window is SyncWindow.TODAY:
        start = midnight
    elif window is SyncWindow.WEEK:
        start = midnight - timedelta(days=now.weekday())
    else:
        start = midnight.replace(day=1)

    return WindowRange(start=start, end=now, label=window.value)

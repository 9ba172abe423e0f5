"""Unit tests for sync window resolution."""

from datetime import datetime, timezone

from order_sync_service.services.windows import SyncWindow, resolve_window

# Thursday
NOW = datetime(2026, 10, 15, 14, 30, tzinfo=timezone.utc)


def test_today_starts_at_midnight() -> None:
    window = resolve_window(SyncWindow.TODAY, "UTC", now=NOW)
    assert window.start == datetime(2026, 10, 15, tzinfo=timezone.utc)
    assert window.end == NOW
    assert window.label == "today"


def test_week_starts_on_monday() -> None:
    window = resolve_window(SyncWindow.WEEK, "UTC", now=NOW)
    assert window.start == datetime(2026, 10, 12, tzinfo=timezone.utc)
    assert window.start.weekday() == 0


def test_month_starts_on_first_day() -> None:
    window = resolve_window(SyncWindow.MONTH, "UTC", now=NOW)
    assert window.start == datetime(2026, 10, 1, tzinfo=timezone.utc)


def test_local_timezone_boundaries() -> None:
    # 23:30 UTC on the 15th is already the 16th in Lisbon (UTC+1 in October)
    late = datetime(2026, 10, 15, 23, 30, tzinfo=timezone.utc)
    window = resolve_window(SyncWindow.TODAY, "Europe/Lisbon", now=late)
    assert window.start.day == 16
    assert window.start.hour == 0

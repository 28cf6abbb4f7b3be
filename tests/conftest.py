"""
Pytest configuration and shared fixtures.
"""

import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.dates import get_report_window  # noqa: E402
from models.events import CalendarEvent, CalendarInfo  # noqa: E402
from services.calendar import CalendarProvider  # noqa: E402


@pytest.fixture
def report_window():
    """Week of Mon 2025-11-10 .. Sun 2025-11-16, month of November 2025, UTC."""
    return get_report_window(datetime(2025, 11, 12, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def warsaw_local_time(monkeypatch):
    """Run with Europe/Warsaw as the system local zone (CEST -> CET on 2026-10-25)."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Europe/Warsaw")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def make_event():
    """Factory for events with UTC timestamps."""

    def _make(title: str, start: str, end: str, calendar_id: str = "primary") -> CalendarEvent:
        return CalendarEvent(
            title=title,
            start_timestamp=start,
            end_timestamp=end,
            calendar_id=calendar_id,
        )

    return _make


class FakeProvider(CalendarProvider):
    """In-memory provider: calendars map to event lists."""

    def __init__(self, calendars: dict[str, list[CalendarEvent]], names: dict[str, str] | None = None):
        self.calendars = calendars
        self.names = names or {}
        self.requests: list[tuple[str, datetime, datetime]] = []

    async def list_calendars(self) -> list[CalendarInfo]:
        return [
            {"calendar_id": cal_id, "calendar_name": self.names.get(cal_id, cal_id)}
            for cal_id in self.calendars
        ]

    async def list_events(self, calendar_id, time_min, time_max):
        self.requests.append((calendar_id, time_min, time_max))
        return list(self.calendars[calendar_id])


@pytest.fixture
def fake_provider_factory():
    return FakeProvider

"""
Calendar provider interface, event merging and provider selection.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from core.config import SUPPORTED_PROVIDERS
from core.dates import parse_timestamp
from models.events import CalendarEvent, CalendarInfo, ReportWindow

logger = logging.getLogger(__name__)


class CalendarProviderError(RuntimeError):
    """A calendar provider request failed."""


class CalendarProvider(ABC):
    """Read-only access to a user's calendars and events."""

    @abstractmethod
    async def list_calendars(self) -> list[CalendarInfo]:
        """Return the user's visible calendars."""

    @abstractmethod
    async def list_events(
        self, calendar_id: str, time_min: datetime, time_max: datetime
    ) -> list[CalendarEvent]:
        """Return single event instances between time_min and time_max, by start time."""


def filter_calendars(calendars: list[CalendarInfo], pattern: str) -> list[CalendarInfo]:
    """Keep calendars whose name contains pattern (case-insensitive). Blank keeps all."""
    if not pattern:
        return calendars
    return [c for c in calendars if pattern.lower() in c["calendar_name"].lower()]


def sort_events(events: list[CalendarEvent]) -> list[CalendarEvent]:
    """
    Merge order: ascending start time across calendars.

    Events with unparseable starts keep their relative order at the end.
    """

    def sort_key(event: CalendarEvent):
        try:
            return (0, parse_timestamp(event.start_timestamp).timestamp())
        except ValueError:
            return (1, 0.0)

    return sorted(events, key=sort_key)


async def fetch_all_events(
    provider: CalendarProvider, window: ReportWindow, calendar_pattern: str = ""
) -> list[CalendarEvent]:
    """Fetch events for the report window from every matching calendar."""
    calendars = filter_calendars(await provider.list_calendars(), calendar_pattern)
    logger.info("Fetching events from %d calendar(s)", len(calendars))

    all_events: list[CalendarEvent] = []
    for cal in calendars:
        events = await provider.list_events(
            cal["calendar_id"], window.fetch_begin, window.fetch_end
        )
        logger.info("  %s: %d events", cal["calendar_name"], len(events))
        all_events.extend(events)

    return sort_events(all_events)


def get_calendar_provider(name: str, use_browser: bool = False) -> CalendarProvider:
    """
    Create the configured provider with its auth config injected.

    Args:
        name: "google" or "graph".
        use_browser: Google only; use the loopback browser flow instead of
            pasting the authorization code.
    """
    name = name.lower()
    if name not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unknown calendar provider '{name}' (expected one of: {', '.join(sorted(SUPPORTED_PROVIDERS))})"
        )

    if name == "google":
        from core.auth import ConsoleAuthorization, LocalServerAuthorization
        from core.config import google_auth_config
        from services.google_calendar import GoogleCalendarProvider

        token_provider = LocalServerAuthorization() if use_browser else ConsoleAuthorization()
        return GoogleCalendarProvider.from_config(google_auth_config(), token_provider)

    from core.config import graph_auth_config
    from services.graph_calendar import GraphCalendarProvider

    return GraphCalendarProvider.from_config(graph_auth_config())

"""
Google Calendar provider.
"""

import logging
from datetime import datetime

from googleapiclient.errors import HttpError

from core.auth import TokenProvider
from core.config import GoogleAuthConfig
from core.dates import format_rfc3339
from core.google_client import get_google_service
from models.events import CalendarEvent, CalendarInfo
from services.calendar import CalendarProvider, CalendarProviderError

logger = logging.getLogger(__name__)


def parse_google_event(item: dict, calendar_id: str = "") -> CalendarEvent:
    """
    Convert an events.list item into a CalendarEvent.

    All-day events only carry start.date; their timestamps stay None.
    """
    return CalendarEvent(
        title=item.get("summary") or "",
        start_timestamp=item.get("start", {}).get("dateTime"),
        end_timestamp=item.get("end", {}).get("dateTime"),
        calendar_id=calendar_id,
    )


class GoogleCalendarProvider(CalendarProvider):
    """Calendar API v3 over an authorized discovery service."""

    def __init__(self, service):
        self._service = service

    @classmethod
    def from_config(
        cls, config: GoogleAuthConfig, token_provider: TokenProvider
    ) -> "GoogleCalendarProvider":
        return cls(get_google_service(config, token_provider))

    async def list_calendars(self) -> list[CalendarInfo]:
        calendars: list[CalendarInfo] = []
        page_token = None
        try:
            while True:
                response = (
                    self._service.calendarList()
                    .list(showHidden=False, pageToken=page_token)
                    .execute()
                )
                for item in response.get("items", []):
                    calendars.append(
                        {
                            "calendar_id": item["id"],
                            "calendar_name": item.get("summaryOverride") or item.get("summary", ""),
                        }
                    )
                page_token = response.get("nextPageToken")
                if not page_token:
                    break
        except HttpError as e:
            raise CalendarProviderError(f"Unable to retrieve user's calendars list: {e}") from e

        return calendars

    async def list_events(
        self, calendar_id: str, time_min: datetime, time_max: datetime
    ) -> list[CalendarEvent]:
        events: list[CalendarEvent] = []
        page_token = None
        try:
            while True:
                response = (
                    self._service.events()
                    .list(
                        calendarId=calendar_id,
                        timeMin=format_rfc3339(time_min),
                        timeMax=format_rfc3339(time_max),
                        showDeleted=False,
                        singleEvents=True,
                        orderBy="startTime",
                        pageToken=page_token,
                    )
                    .execute()
                )
                events.extend(
                    parse_google_event(item, calendar_id) for item in response.get("items", [])
                )
                page_token = response.get("nextPageToken")
                if not page_token:
                    break
        except HttpError as e:
            raise CalendarProviderError(
                f"Unable to retrieve events for calendar {calendar_id}: {e}"
            ) from e

        logger.debug("Fetched %d events from %s", len(events), calendar_id)
        return events

"""
MS Graph (Microsoft 365) calendar provider for the signed-in user.
"""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from msgraph.generated.models.o_data_errors.o_data_error import ODataError

from core.config import GRAPH_PAGE_SIZE, GraphAuthConfig
from core.dates import format_rfc3339
from core.graph_client import PromptCallback, get_graph_client
from models.events import CalendarEvent, CalendarInfo
from services.calendar import CalendarProvider, CalendarProviderError

logger = logging.getLogger(__name__)


def to_rfc3339(value) -> str | None:
    """
    Normalise a Graph DateTimeTimeZone into an RFC 3339 string.

    Graph returns 7 fractional digits and a separate zone name. Values that
    cannot be normalised are returned as-is and rejected later.
    """
    if value is None or not value.date_time:
        return None

    date_time = value.date_time
    if "." in date_time:
        head, fraction = date_time.split(".", 1)
        date_time = f"{head}.{fraction[:6]}"

    tz_name = value.time_zone or "UTC"
    try:
        tz = timezone.utc if tz_name.upper() == "UTC" else ZoneInfo(tz_name)
        return datetime.fromisoformat(date_time).replace(tzinfo=tz).isoformat()
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("Cannot normalise %s (%s)", value.date_time, tz_name)
        return value.date_time


def parse_graph_event(event, calendar_id: str = "") -> CalendarEvent:
    """Convert an MS Graph Event model into a CalendarEvent."""
    if event.is_all_day:
        start_ts = end_ts = None
    else:
        start_ts = to_rfc3339(event.start)
        end_ts = to_rfc3339(event.end)

    return CalendarEvent(
        title=event.subject or "",
        start_timestamp=start_ts,
        end_timestamp=end_ts,
        calendar_id=calendar_id,
    )


class GraphCalendarProvider(CalendarProvider):
    """Calendars and calendarView of /me via the MS Graph SDK."""

    def __init__(self, graph):
        self._graph = graph

    @classmethod
    def from_config(
        cls, config: GraphAuthConfig, prompt_callback: PromptCallback | None = None
    ) -> "GraphCalendarProvider":
        return cls(get_graph_client(config, prompt_callback))

    async def list_calendars(self) -> list[CalendarInfo]:
        calendars: list[CalendarInfo] = []
        try:
            response = await self._graph.me.calendars.get()
            while response is not None:
                for calendar in response.value or []:
                    calendars.append(
                        {"calendar_id": calendar.id, "calendar_name": calendar.name or ""}
                    )
                if not response.odata_next_link:
                    break
                response = await self._graph.me.calendars.with_url(response.odata_next_link).get()
        except ODataError as e:
            raise CalendarProviderError(f"Unable to retrieve user's calendars list: {e}") from e

        return calendars

    async def list_events(
        self, calendar_id: str, time_min: datetime, time_max: datetime
    ) -> list[CalendarEvent]:
        from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
            CalendarViewRequestBuilder,
        )

        query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
            start_date_time=format_rfc3339(time_min),
            end_date_time=format_rfc3339(time_max),
            orderby=["start/dateTime"],
            top=GRAPH_PAGE_SIZE,
        )
        config = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetRequestConfiguration(
            query_parameters=query_params
        )
        config.headers.add("Prefer", 'outlook.timezone="UTC"')

        calendar_view = self._graph.me.calendars.by_calendar_id(calendar_id).calendar_view
        events: list[CalendarEvent] = []
        try:
            response = await calendar_view.get(request_configuration=config)
            while response is not None:
                events.extend(parse_graph_event(e, calendar_id) for e in response.value or [])
                if not response.odata_next_link:
                    break
                # Next links carry the query; the Prefer header must be resent
                response = await calendar_view.with_url(response.odata_next_link).get(
                    request_configuration=config
                )
        except ODataError as e:
            raise CalendarProviderError(
                f"Unable to retrieve events for calendar {calendar_id}: {e}"
            ) from e

        logger.debug("Fetched %d events from %s", len(events), calendar_id)
        return events

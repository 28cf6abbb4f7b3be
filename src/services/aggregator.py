"""
Weekly and monthly hour totals from matching calendar events.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from core.config import HOURS_PER_WORKDAY
from core.dates import parse_timestamp
from models.events import AggregateResult, CalendarEvent, EventEntry, ReportWindow

logger = logging.getLogger(__name__)


def event_hours(start: datetime, end: datetime) -> float:
    """Duration in fractional hours."""
    return (end - start).total_seconds() / 3600


def aggregate(
    events: Iterable[CalendarEvent],
    window: ReportWindow,
    title_prefix: str,
    hours_per_day: int = HOURS_PER_WORKDAY,
) -> AggregateResult:
    """
    Sum matching event durations into week and month totals.

    Events must arrive in ascending start-time order: a work day is counted
    when a matching event's day-of-month differs from the previous matching
    event's. Window bounds are exclusive, so an event starting or ending
    exactly on a boundary is left out of that window.
    """
    result = AggregateResult(hours_per_day=hours_per_day)
    last_day = 0

    for event in events:
        if not event.title.startswith(title_prefix):
            continue

        try:
            start = parse_timestamp(event.start_timestamp)
            end = parse_timestamp(event.end_timestamp)
        except ValueError as e:
            logger.warning("Skipping event %r: unparseable timestamp (%s)", event.title, e)
            continue

        in_week = start > window.week_begin and end < window.week_end
        in_month = start > window.month_begin and end < window.month_end

        hours = event_hours(start, end)

        day = start.astimezone(window.tz).day
        if day != last_day:
            last_day = day
            if in_week:
                result.work_days_in_week += 1
            if in_month:
                result.work_days_in_month += 1

        if in_week:
            result.week_total_hours += hours
        if in_month:
            result.month_total_hours += hours

        result.entries.append(
            EventEntry(
                title=event.title,
                start=start,
                end=end,
                hours=hours,
                in_week=in_week,
                in_month=in_month,
            )
        )

    logger.debug(
        "Aggregated %d matching events: week %.2fh/%d days, month %.2fh/%d days",
        len(result.entries),
        result.week_total_hours,
        result.work_days_in_week,
        result.month_total_hours,
        result.work_days_in_month,
    )
    return result

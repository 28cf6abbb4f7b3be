"""
Date utilities: report window, timestamp parsing and formatting.
"""

import calendar
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from models.events import ReportWindow

END_OF_DAY = time(23, 59, 59)


def resolve_timezone(timezone_name: str):
    """Return a ZoneInfo for the name, or None for the system local zone."""
    if not timezone_name:
        return None
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Invalid timezone: {timezone_name}") from e


def resolve_now(as_of_date_str: str | None = None, timezone_name: str = "") -> datetime:
    """
    Return the reference time for the report as an aware datetime.

    Args:
        as_of_date_str: Optional date string (YYYY-MM-DD). Uses now if None;
            otherwise noon of that date.
        timezone_name: IANA zone name. Blank uses the system local zone.
    """
    tz = resolve_timezone(timezone_name)

    if as_of_date_str:
        as_of = datetime.strptime(as_of_date_str, "%Y-%m-%d").date()
        reference = datetime.combine(as_of, time(12, 0))
        if tz is None:
            return reference.astimezone()
        return reference.replace(tzinfo=tz)

    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def _boundary(day: date, at: time, tz) -> datetime:
    # Local boundaries take the UTC offset in force on that date
    if tz is None:
        return datetime.combine(day, at).astimezone()
    return datetime.combine(day, at, tzinfo=tz)


def get_report_window(now: datetime, local_zone: bool = False) -> ReportWindow:
    """
    Calculate the week (Monday 00:00:00 - Sunday 23:59:59) and the month
    (1st 00:00:00 - last day 23:59:59) containing `now`.

    Boundaries are in now's zone, or in the system local zone when
    `local_zone` is set, so each one gets its own DST offset.
    """
    if now.tzinfo is None:
        raise ValueError("Reference time must be timezone-aware")

    if local_zone:
        tz = None
        today = now.astimezone().date()
    else:
        tz = now.tzinfo
        today = now.date()

    _, last_day = calendar.monthrange(today.year, today.month)
    month_begin = _boundary(today.replace(day=1), time.min, tz)
    month_end = _boundary(today.replace(day=last_day), END_OF_DAY, tz)

    monday = today - timedelta(days=today.weekday())
    week_begin = _boundary(monday, time.min, tz)
    week_end = _boundary(monday + timedelta(days=6), END_OF_DAY, tz)

    return ReportWindow(
        week_begin=week_begin,
        week_end=week_end,
        month_begin=month_begin,
        month_end=month_end,
        tz=tz,
    )


def parse_timestamp(value: str | None) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime."""
    if not value:
        raise ValueError("missing date-time")
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp has no UTC offset: {value!r}")
    return parsed


def format_rfc3339(dt: datetime) -> str:
    """Format an aware datetime for provider query parameters."""
    return dt.isoformat(timespec="seconds")


def format_rfc1123(dt: datetime) -> str:
    """Format as 'Mon, 02 Jan 2006 15:04:05 MST'."""
    return dt.strftime("%a, %d %b %Y %H:%M:%S %Z")


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"

"""
Data models for calendars, events and report results.

Provider-facing records use TypedDict / frozen dataclasses; parsed
results carry real datetimes.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import TypedDict


class CalendarInfo(TypedDict):
    """Calendar discovery result."""
    calendar_id: str
    calendar_name: str


@dataclass(frozen=True)
class CalendarEvent:
    """Raw calendar event as returned by a provider (RFC 3339 timestamps)."""

    title: str
    start_timestamp: str | None
    end_timestamp: str | None
    calendar_id: str = ""


@dataclass(frozen=True)
class ReportWindow:
    """Current week (Monday-first) and current month, both inclusive of 23:59:59."""

    week_begin: datetime
    week_end: datetime
    month_begin: datetime
    month_end: datetime
    # Zone for day-of-month; None means the system local zone
    tz: tzinfo | None = None

    @property
    def fetch_begin(self) -> datetime:
        # The week can start in the previous month
        return min(self.week_begin, self.month_begin)

    @property
    def fetch_end(self) -> datetime:
        return max(self.week_end, self.month_end)


@dataclass(frozen=True)
class EventEntry:
    """A matching event after timestamp parsing."""

    title: str
    start: datetime
    end: datetime
    hours: float
    in_week: bool
    in_month: bool


@dataclass
class AggregateResult:
    """Weekly and monthly totals against the workday target."""

    week_total_hours: float = 0.0
    month_total_hours: float = 0.0
    work_days_in_week: int = 0
    work_days_in_month: int = 0
    hours_per_day: int = 8
    entries: list[EventEntry] = field(default_factory=list)

    @property
    def week_target(self) -> float:
        return float(self.work_days_in_week * self.hours_per_day)

    @property
    def month_target(self) -> float:
        return float(self.work_days_in_month * self.hours_per_day)

    @property
    def week_balance(self) -> float:
        return self.week_total_hours - self.week_target

    @property
    def month_balance(self) -> float:
        return self.month_total_hours - self.month_target

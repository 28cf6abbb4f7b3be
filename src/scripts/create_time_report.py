#!/usr/bin/env python3
"""
Create the weekly/monthly hours report from calendar events.

Fetches this week's and this month's events from every calendar, keeps the
ones whose title starts with the configured prefix, and prints each of them
followed by week and month totals against the 8-hours-per-workday target.

Usage:
    python src/scripts/create_time_report.py
    python src/scripts/create_time_report.py --date 2025-11-07 --prefix "SolarWinds"
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import (
    CALENDAR_PATTERN,
    CALENDAR_PROVIDER,
    HOURS_PER_WORKDAY,
    REPORT_TIMEZONE,
    SUPPORTED_PROVIDERS,
    TITLE_PREFIX,
)
from core.dates import get_report_window, resolve_now
from core.logging import configure_logging
from services.aggregator import aggregate
from services.calendar import fetch_all_events, get_calendar_provider
from services.reports import create_excel_report, render_report

logger = logging.getLogger(__name__)


async def main(
    as_of_date_str: str | None = None,
    title_prefix: str = TITLE_PREFIX,
    provider_name: str = CALENDAR_PROVIDER,
    calendar_pattern: str = CALENDAR_PATTERN,
    use_browser: bool = False,
    xlsx_path: Path | None = None,
):
    """Main entry point."""
    try:
        # 1. Calculate report window
        window = get_report_window(
            resolve_now(as_of_date_str, REPORT_TIMEZONE), local_zone=not REPORT_TIMEZONE
        )
        logger.info("Month: %s - %s", window.month_begin, window.month_end)
        logger.info("Week: %s - %s", window.week_begin, window.week_end)

        # 2. Authenticate and fetch events from all calendars
        provider = get_calendar_provider(provider_name, use_browser=use_browser)
        events = await fetch_all_events(provider, window, calendar_pattern)
        logger.info("Total events: %d", len(events))

        # 3. Aggregate and print
        result = aggregate(events, window, title_prefix, HOURS_PER_WORKDAY)
        for line in render_report(result):
            print(line)

        # 4. Optional Excel export
        if xlsx_path:
            create_excel_report(result, window, xlsx_path)

        return result

    except Exception as e:
        logger.exception("Error: %s", e)
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate weekly/monthly hours report")
    parser.add_argument(
        "--date",
        help="As-of date (YYYY-MM-DD). Reports the week and month containing it. Defaults to today.",
    )
    parser.add_argument(
        "--prefix",
        default=TITLE_PREFIX,
        help=f"Count only events whose title starts with this (default: {TITLE_PREFIX!r}).",
    )
    parser.add_argument(
        "--provider",
        default=CALENDAR_PROVIDER,
        choices=sorted(SUPPORTED_PROVIDERS),
        help=f"Calendar provider (default: {CALENDAR_PROVIDER}).",
    )
    parser.add_argument(
        "--calendar",
        default=CALENDAR_PATTERN,
        help="Only calendars whose name contains this text. Defaults to all calendars.",
    )
    parser.add_argument(
        "--browser",
        action="store_true",
        help="Google only: authorize in the browser instead of pasting a code.",
    )
    parser.add_argument("--xlsx", type=Path, help="Also write an Excel report to this path.")
    args = parser.parse_args()

    configure_logging()
    try:
        asyncio.run(
            main(
                args.date,
                title_prefix=args.prefix,
                provider_name=args.provider,
                calendar_pattern=args.calendar,
                use_browser=args.browser,
                xlsx_path=args.xlsx,
            )
        )
    except Exception:
        sys.exit(1)

#!/usr/bin/env python3
"""
List the signed-in user's calendars.

Handy for picking a --calendar pattern for the report.

Usage:
    python src/scripts/list_calendars.py --provider graph
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import CALENDAR_PROVIDER, SUPPORTED_PROVIDERS
from core.logging import configure_logging
from services.calendar import get_calendar_provider


async def main(provider_name: str = CALENDAR_PROVIDER, use_browser: bool = False):
    """List all calendars with their IDs."""
    provider = get_calendar_provider(provider_name, use_browser=use_browser)

    calendars = await provider.list_calendars()
    print(f"Found {len(calendars)} calendars\n")
    print("=" * 80)

    for cal in calendars:
        print(f"  - {cal['calendar_name']}")
        print(f"    ID: {cal['calendar_id']}")

    print("-" * 80)
    return calendars


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="List calendars")
    parser.add_argument("--provider", default=CALENDAR_PROVIDER, choices=sorted(SUPPORTED_PROVIDERS))
    parser.add_argument("--browser", action="store_true")
    args = parser.parse_args()

    configure_logging()
    asyncio.run(main(args.provider, args.browser))

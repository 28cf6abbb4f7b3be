"""
Configuration constants and environment setup.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

CREDENTIALS_DIR = Path.home() / ".credentials"

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

TITLE_PREFIX = os.environ.get("TITLE_PREFIX", "SolarWinds")
CALENDAR_PATTERN = os.environ.get("CALENDAR_PATTERN", "")  # e.g., "Work"; blank = all calendars
REPORT_TIMEZONE = os.environ.get("REPORT_TIMEZONE", "")  # IANA name; blank = system local zone
HOURS_PER_WORKDAY = 8

EVENTS_HEADERS = ["Start", "End", "Hours", "Title", "In Week", "In Month"]
SUMMARY_HEADERS = ["Period", "Total Hours", "Work Days", "Target Hours", "Balance"]

# =============================================================================
# CALENDAR PROVIDER
# =============================================================================

CALENDAR_PROVIDER = os.environ.get("CALENDAR_PROVIDER", "google").lower()
SUPPORTED_PROVIDERS = {"google", "graph"}

# =============================================================================
# GOOGLE OAUTH (installed app)
# =============================================================================

GOOGLE_SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]
GOOGLE_CLIENT_SECRET_FILE = Path(
    os.environ.get("GOOGLE_CLIENT_SECRET_FILE", "client_secret.json")
)
GOOGLE_TOKEN_CACHE_FILE = Path(
    os.environ.get(
        "GOOGLE_TOKEN_CACHE_FILE", str(CREDENTIALS_DIR / "calendar-hours-summary.json")
    )
).expanduser()
GOOGLE_CONSOLE_REDIRECT_URI = "http://localhost"

# =============================================================================
# MS GRAPH (delegated, device code)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "common")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_SCOPES = ["Calendars.Read"]
GRAPH_AUTH_RECORD_FILE = Path(
    os.environ.get(
        "MICROSOFT_GRAPH_AUTH_RECORD_FILE",
        str(CREDENTIALS_DIR / "calendar-hours-summary-graph.json"),
    )
).expanduser()
GRAPH_TOKEN_CACHE_NAME = "calendar-hours-summary"
GRAPH_PAGE_SIZE = 100

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


# =============================================================================
# INJECTABLE AUTH CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class GoogleAuthConfig:
    """Where the Google client secret and the cached token live."""

    client_secret_path: Path
    token_path: Path
    scopes: list[str] = field(default_factory=lambda: list(GOOGLE_SCOPES))


@dataclass(frozen=True)
class GraphAuthConfig:
    """App registration and authentication record location for MS Graph."""

    tenant_id: str
    client_id: str
    auth_record_path: Path
    cache_name: str = GRAPH_TOKEN_CACHE_NAME
    scopes: list[str] = field(default_factory=lambda: list(GRAPH_SCOPES))


def google_auth_config() -> GoogleAuthConfig:
    """Build the Google auth config from environment settings."""
    return GoogleAuthConfig(
        client_secret_path=GOOGLE_CLIENT_SECRET_FILE,
        token_path=GOOGLE_TOKEN_CACHE_FILE,
    )


def graph_auth_config() -> GraphAuthConfig:
    """Build the MS Graph auth config from environment settings."""
    return GraphAuthConfig(
        tenant_id=GRAPH_TENANT_ID,
        client_id=GRAPH_APP_ID,
        auth_record_path=GRAPH_AUTH_RECORD_FILE,
    )

"""
Google Calendar API service construction.
"""

from googleapiclient.discovery import build

from core.auth import TokenProvider, load_google_credentials
from core.config import GoogleAuthConfig


def get_google_service(config: GoogleAuthConfig, token_provider: TokenProvider):
    """Authorize and build a Calendar v3 service."""
    credentials = load_google_credentials(config, token_provider)
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)

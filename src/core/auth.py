"""
Google OAuth2: token cache and interactive token providers.

A token provider is any callable taking an InstalledAppFlow and returning
Credentials. Scripts inject one; tests inject a fake.
"""

import logging
import os
import sys
from collections.abc import Callable
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from core.config import GOOGLE_CONSOLE_REDIRECT_URI, GoogleAuthConfig

logger = logging.getLogger(__name__)

TokenProvider = Callable[[InstalledAppFlow], Credentials]


class TokenStore:
    """JSON file holding the cached authorized-user credentials."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self, scopes: list[str]) -> Credentials | None:
        """Return cached credentials, or None if absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            return Credentials.from_authorized_user_file(str(self.path), scopes)
        except ValueError as e:
            logger.warning("Ignoring unreadable token cache %s: %s", self.path, e)
            return None

    def save(self, credentials: Credentials) -> None:
        """Write credentials with owner-only permissions."""
        logger.info("Saving credential file to: %s", self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(credentials.to_json())


def read_from_terminal(label: str) -> str:
    """Prompt on stderr so stdout carries only report lines."""
    print(label, end="", file=sys.stderr, flush=True)
    return input()


def extract_authorization_code(entered: str) -> str:
    """Accept either the bare code or the whole redirected URL."""
    entered = entered.strip()
    if entered.startswith(("http://", "https://")):
        query = parse_qs(urlsplit(entered).query)
        if "error" in query:
            raise ValueError(f"Authorization denied: {query['error'][0]}")
        return query.get("code", [""])[0]
    return entered


class ConsoleAuthorization:
    """
    Print the authorization URL and read the result back from the user.

    Google redirects to a loopback address nothing listens on, so the
    browser shows an error page; its address bar holds the code.
    """

    def __init__(
        self,
        prompt: Callable[[str], str] = read_from_terminal,
        redirect_uri: str = GOOGLE_CONSOLE_REDIRECT_URI,
    ):
        self.prompt = prompt
        self.redirect_uri = redirect_uri

    def __call__(self, flow: InstalledAppFlow) -> Credentials:
        flow.redirect_uri = self.redirect_uri
        auth_url, _ = flow.authorization_url(access_type="offline", prompt="consent")
        print(
            "Go to the following link in your browser, approve access, then paste\n"
            "the address of the page it redirects to (or just its code):\n"
            f"{auth_url}",
            file=sys.stderr,
        )
        code = extract_authorization_code(self.prompt("Authorization code or URL: "))
        if not code:
            raise ValueError("No authorization code entered")
        flow.fetch_token(code=code)
        return flow.credentials


class LocalServerAuthorization:
    """Open the browser and catch the redirect on a loopback port."""

    def __init__(self, port: int = 0):
        self.port = port

    def __call__(self, flow: InstalledAppFlow) -> Credentials:
        return flow.run_local_server(port=self.port)


def load_google_credentials(
    config: GoogleAuthConfig, token_provider: TokenProvider
) -> Credentials:
    """
    Return valid credentials from the cache, refreshing or re-authorizing
    as needed. New or refreshed credentials are written back to the cache.

    Raises:
        FileNotFoundError: if the client secret file is missing
    """
    if not config.client_secret_path.exists():
        raise FileNotFoundError(f"Client secret file not found: {config.client_secret_path}")

    store = TokenStore(config.token_path)
    creds = store.load(config.scopes)

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
            store.save(creds)
            return creds
        except RefreshError as e:
            logger.warning("Token refresh failed, re-authorizing: %s", e)

    flow = InstalledAppFlow.from_client_secrets_file(
        str(config.client_secret_path), config.scopes
    )
    creds = token_provider(flow)
    store.save(creds)
    return creds

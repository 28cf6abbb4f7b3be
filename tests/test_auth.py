"""Tests for the Google token cache and token providers."""

import json
import stat
from datetime import datetime, timedelta, timezone

import pytest
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials

from core.auth import ConsoleAuthorization, TokenStore, load_google_credentials
from core.config import GOOGLE_SCOPES, GoogleAuthConfig

CLIENT_SECRET = {
    "installed": {
        "client_id": "client-id.apps.googleusercontent.com",
        "client_secret": "client-secret",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
        "redirect_uris": ["http://localhost"],
    }
}


def make_credentials(token="access-token", expiry=None):
    return Credentials(
        token=token,
        expiry=expiry,
        refresh_token="refresh-token",
        token_uri="https://oauth2.googleapis.com/token",
        client_id="client-id.apps.googleusercontent.com",
        client_secret="client-secret",
        scopes=GOOGLE_SCOPES,
    )


@pytest.fixture
def auth_config(tmp_path):
    secret_path = tmp_path / "client_secret.json"
    secret_path.write_text(json.dumps(CLIENT_SECRET))
    return GoogleAuthConfig(
        client_secret_path=secret_path,
        token_path=tmp_path / "credentials" / "token.json",
    )


class RecordingTokenProvider:
    def __init__(self, credentials):
        self.credentials = credentials
        self.flows = []

    def __call__(self, flow):
        self.flows.append(flow)
        return self.credentials


def test_token_store_round_trip(tmp_path):
    store = TokenStore(tmp_path / "creds" / "token.json")

    store.save(make_credentials())
    loaded = store.load(GOOGLE_SCOPES)

    assert loaded.token == "access-token"
    assert loaded.refresh_token == "refresh-token"
    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_token_store_missing_and_corrupt(tmp_path):
    store = TokenStore(tmp_path / "token.json")
    assert store.load(GOOGLE_SCOPES) is None

    store.path.write_text("{not json")
    assert store.load(GOOGLE_SCOPES) is None


def test_missing_client_secret_is_fatal(tmp_path):
    config = GoogleAuthConfig(
        client_secret_path=tmp_path / "missing.json", token_path=tmp_path / "token.json"
    )

    with pytest.raises(FileNotFoundError, match="Client secret file not found"):
        load_google_credentials(config, RecordingTokenProvider(make_credentials()))


def test_cached_token_skips_authorization(auth_config):
    TokenStore(auth_config.token_path).save(make_credentials("cached"))
    provider = RecordingTokenProvider(make_credentials("fresh"))

    creds = load_google_credentials(auth_config, provider)

    assert creds.token == "cached"
    assert provider.flows == []


def test_missing_token_runs_provider_and_persists(auth_config):
    provider = RecordingTokenProvider(make_credentials("fresh"))

    creds = load_google_credentials(auth_config, provider)

    assert creds.token == "fresh"
    assert len(provider.flows) == 1
    assert provider.flows[0].client_config["client_id"] == "client-id.apps.googleusercontent.com"
    saved = json.loads(auth_config.token_path.read_text())
    assert saved["token"] == "fresh"
    assert saved["refresh_token"] == "refresh-token"


class FakeFlow:
    def __init__(self):
        self.redirect_uri = None
        self.codes = []
        self.credentials = make_credentials("exchanged")

    def authorization_url(self, **kwargs):
        self.auth_kwargs = kwargs
        return "https://accounts.example/auth?x=1", "state"

    def fetch_token(self, code):
        self.codes.append(code)


def test_console_authorization_exchanges_entered_code(capsys):
    flow = FakeFlow()
    authorize = ConsoleAuthorization(prompt=lambda _: "  4/abc-code \n")

    creds = authorize(flow)

    assert creds.token == "exchanged"
    assert flow.codes == ["4/abc-code"]
    assert flow.redirect_uri == "http://localhost"
    assert flow.auth_kwargs["access_type"] == "offline"
    captured = capsys.readouterr()
    assert "https://accounts.example/auth?x=1" in captured.err
    assert captured.out == ""


def test_console_authorization_requires_code():
    with pytest.raises(ValueError, match="No authorization code"):
        ConsoleAuthorization(prompt=lambda _: "")(FakeFlow())


def test_console_authorization_accepts_redirected_url():
    flow = FakeFlow()
    redirected = "http://localhost/?state=xyz&code=4/from-url&scope=calendar.readonly"

    ConsoleAuthorization(prompt=lambda _: redirected)(flow)

    assert flow.codes == ["4/from-url"]


def test_console_authorization_reports_denied_access():
    with pytest.raises(ValueError, match="access_denied"):
        ConsoleAuthorization(prompt=lambda _: "http://localhost/?error=access_denied")(FakeFlow())


EXPIRED = datetime(2000, 1, 1)


def test_expired_token_is_refreshed_and_saved(auth_config, monkeypatch):
    TokenStore(auth_config.token_path).save(make_credentials("stale", expiry=EXPIRED))

    def fake_refresh(self, request):
        self.token = "refreshed"
        self.expiry = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1)

    monkeypatch.setattr(Credentials, "refresh", fake_refresh)
    provider = RecordingTokenProvider(make_credentials("fresh"))

    creds = load_google_credentials(auth_config, provider)

    assert creds.token == "refreshed"
    assert provider.flows == []
    assert json.loads(auth_config.token_path.read_text())["token"] == "refreshed"


def test_failed_refresh_falls_back_to_authorization(auth_config, monkeypatch):
    TokenStore(auth_config.token_path).save(make_credentials("stale", expiry=EXPIRED))

    def failing_refresh(self, request):
        raise RefreshError("invalid_grant: Token has been expired or revoked.")

    monkeypatch.setattr(Credentials, "refresh", failing_refresh)
    provider = RecordingTokenProvider(make_credentials("fresh"))

    creds = load_google_credentials(auth_config, provider)

    assert creds.token == "fresh"
    assert len(provider.flows) == 1
    assert json.loads(auth_config.token_path.read_text())["token"] == "fresh"

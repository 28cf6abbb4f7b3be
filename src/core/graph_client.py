"""
MS Graph client setup with delegated (device code) authentication.
"""

import logging
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from azure.identity import (
    AuthenticationRecord,
    DeviceCodeCredential,
    TokenCachePersistenceOptions,
)
from msgraph import GraphServiceClient

from core.config import GraphAuthConfig

logger = logging.getLogger(__name__)

PromptCallback = Callable[[str, str, datetime], None]


def load_authentication_record(path: Path) -> AuthenticationRecord | None:
    """Read a serialized authentication record, or None if absent."""
    if not path.exists():
        return None
    try:
        return AuthenticationRecord.deserialize(path.read_text(encoding="utf-8"))
    except (ValueError, KeyError) as e:
        logger.warning("Ignoring unreadable authentication record %s: %s", path, e)
        return None


def save_authentication_record(path: Path, record: AuthenticationRecord) -> None:
    """Persist the authentication record so the next run skips the device flow."""
    logger.info("Saving authentication record to: %s", path)
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    path.write_text(record.serialize(), encoding="utf-8")
    path.chmod(0o600)


def console_device_prompt(verification_uri: str, user_code: str, expires_on: datetime) -> None:
    """Tell the user where to enter the device code."""
    print(
        f"Go to {verification_uri} and enter the code {user_code} (expires {expires_on:%H:%M})",
        file=sys.stderr,
    )


def get_graph_client(
    config: GraphAuthConfig, prompt_callback: PromptCallback | None = None
) -> GraphServiceClient:
    """
    Create an MS Graph client for the signed-in user.

    The first run walks through the device code flow and saves an
    authentication record; later runs reuse the persistent token cache.
    """
    if not config.client_id:
        raise ValueError("MICROSOFT_GRAPH_APP_ID is not set")

    record = load_authentication_record(config.auth_record_path)
    credential = DeviceCodeCredential(
        client_id=config.client_id,
        tenant_id=config.tenant_id,
        prompt_callback=prompt_callback or console_device_prompt,
        cache_persistence_options=TokenCachePersistenceOptions(
            name=config.cache_name, allow_unencrypted_storage=True
        ),
        authentication_record=record,
    )

    if record is None:
        record = credential.authenticate(scopes=config.scopes)
        save_authentication_record(config.auth_record_path, record)

    return GraphServiceClient(credentials=credential, scopes=config.scopes)

"""
OAuth credentials shared by the Gmail and Sheets clients.

Tokens are stored at the configured token path; DO NOT COMMIT token/credentials.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

import config

logger = logging.getLogger(__name__)


def load_credentials(
    token_path: str = config.TOKEN_PATH,
    client_secrets_file: str = config.CLIENT_SECRETS_FILE,
    scopes: Sequence[str] = tuple(config.SCOPES),
) -> Credentials:
    """
    Load OAuth credentials. Refresh if expired, otherwise run installed-app flow.
    Saves token to token_path for reuse on next run.
    """
    path = Path(token_path)
    creds: Optional[Credentials] = None

    if path.exists():
        creds = Credentials.from_authorized_user_file(str(path), list(scopes))
        logger.debug("Loaded existing token from %s", path)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired token...")
            creds.refresh(Request())
        else:
            logger.info("Running OAuth InstalledAppFlow (browser will open)...")
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets_file, list(scopes))
            creds = flow.run_local_server(port=0)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(creds.to_json(), encoding="utf-8")
        logger.info("Saved token to %s (DO NOT COMMIT)", path)

    return creds

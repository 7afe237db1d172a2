"""Runtime configuration loaded from the environment.

Settings are optional; a missing value disables the sink that needs it.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    webhook_url: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    sheet_name: Optional[str] = None
    token_path: str = config.TOKEN_PATH
    client_secrets_file: str = config.CLIENT_SECRETS_FILE

    @property
    def notification_enabled(self) -> bool:
        return bool(self.webhook_url)

    @property
    def ledger_enabled(self) -> bool:
        return bool(self.spreadsheet_id and self.sheet_name)


def _optional(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = (environ.get(key) or "").strip()
    return value or None


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build an AppConfig from ``environ`` (defaults to os.environ plus .env)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    app_config = AppConfig(
        webhook_url=_optional(environ, "WEBHOOK_URL"),
        spreadsheet_id=_optional(environ, "SPREADSHEET_ID"),
        sheet_name=_optional(environ, "SHEET_NAME"),
        token_path=_optional(environ, "GOOGLE_TOKEN_PATH") or config.TOKEN_PATH,
        client_secrets_file=(
            _optional(environ, "GOOGLE_CLIENT_SECRETS_FILE") or config.CLIENT_SECRETS_FILE
        ),
    )
    logger.debug(
        "Loaded config: notification=%s ledger=%s",
        app_config.notification_enabled,
        app_config.ledger_enabled,
    )
    return app_config

"""Entry point run by cron: forward new Syncable donations to Slack and Sheets.

Steps:
1. Load settings (WEBHOOK_URL, SPREADSHEET_ID, SHEET_NAME) from the environment / .env.
2. Build the Slack notifier and the Sheets ledger for the settings that are present.
3. Search Gmail for unread donation emails and parse each body.
4. Notify Slack, append a row to the sheet, then mark the email as read.

Errors are logged; the process always exits 0 so the scheduler never sees a crash.
Note: Do NOT commit credentials or token files.
"""
from __future__ import annotations

import logging
import sys

from src.config_service import load_config
from src.donation_app import build_app


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> int:
    try:
        app = build_app(load_config())
        app.check_for_new_donations()
    except Exception as exc:
        logger.error("Donation check aborted: %s", exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())

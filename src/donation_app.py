"""Donation notifier: ties the inbox scan to the Slack and Sheets sinks.

Per message the flow is scan -> notify -> record -> mark read. A message is
marked read only when every configured sink succeeded, so failed messages
stay unread and are picked up again on the next run. A notification that
was already sent is not undone when recording fails afterwards.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

import requests

from src.config_service import AppConfig
from src.gmail_service import GmailMailbox, authenticate_gmail
from src.inbox_scanner import scan_donations
from src.models import FoundDonation, RunSummary
from src.ports import JsonPoster, Mailbox, Spreadsheet
from src.sheets_service import GoogleSpreadsheet, LedgerRecorder, authenticate_sheets
from src.slack_service import SlackNotifier

logger = logging.getLogger(__name__)


class DonationNotifierApp:
    def __init__(
        self,
        config: AppConfig,
        mailbox_factory: Callable[[], Mailbox],
        notifier: Optional[SlackNotifier] = None,
        recorder: Optional[LedgerRecorder] = None,
    ) -> None:
        self._config = config
        self._mailbox_factory = mailbox_factory
        self._notifier = notifier
        self._recorder = recorder

    def check_for_new_donations(self) -> RunSummary:
        """Process every unread donation email once. Never raises."""
        summary = RunSummary()

        if not self._config.notification_enabled:
            logger.warning("WEBHOOK_URL is not set; skipping donation check")
            summary.disabled = True
            return summary

        logger.info("Checking for new donations")

        try:
            mailbox = self._mailbox_factory()
            for found in scan_donations(mailbox):
                summary.found += 1
                if self._process_donation(mailbox, found):
                    summary.processed += 1
                else:
                    summary.failed += 1
        except Exception as exc:
            logger.error("Error while checking for donations: %s", exc)
            return summary

        logger.info(
            "Donation check complete: %d found, %d processed, %d failed",
            summary.found,
            summary.processed,
            summary.failed,
        )
        return summary

    def _process_donation(self, mailbox: Mailbox, found: FoundDonation) -> bool:
        details = found.details
        logger.info(
            "Processing donation: %s, %s, %s円, %s",
            details.date,
            details.name,
            f"{details.amount:,}",
            details.frequency,
        )

        try:
            if self._notifier is not None:
                self._notifier.send_donation_notification(
                    details.date, details.amount, details.frequency
                )

            if self._recorder is not None:
                self._recorder.record_donation(
                    details.date, details.name, details.amount, details.frequency
                )

            mailbox.mark_read(found.message_id)
        except Exception as exc:
            logger.error("Failed to process donation (messageId: %s): %s", found.message_id, exc)
            return False

        logger.info("Donation processed (messageId: %s)", found.message_id)
        return True


def build_app(
    config: AppConfig,
    mailbox_factory: Optional[Callable[[], Mailbox]] = None,
    spreadsheet: Optional[Spreadsheet] = None,
    http: JsonPoster = requests,
) -> DonationNotifierApp:
    """Construct the app, creating only the sinks the config enables.

    Google adapters are created only when not injected, and authenticate
    on first use.
    """
    notifier = None
    if config.notification_enabled:
        notifier = SlackNotifier(config.webhook_url, http=http)

    recorder = None
    if config.ledger_enabled:
        if spreadsheet is None:
            spreadsheet = GoogleSpreadsheet(
                lambda: authenticate_sheets(config.token_path, config.client_secrets_file),
                config.spreadsheet_id,
            )
        recorder = LedgerRecorder(spreadsheet, config.sheet_name)
        recorder.ensure_headers()

    if mailbox_factory is None:
        def mailbox_factory() -> Mailbox:
            return GmailMailbox(
                authenticate_gmail(config.token_path, config.client_secrets_file)
            )

    return DonationNotifierApp(config, mailbox_factory, notifier, recorder)

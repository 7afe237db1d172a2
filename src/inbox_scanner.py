"""Finds unread Syncable donation emails and yields their parsed details."""
from __future__ import annotations

import logging
from typing import Iterator

import config
from src.email_parser import extract_donation_details
from src.models import FoundDonation
from src.ports import Mailbox

logger = logging.getLogger(__name__)


def scan_donations(
    mailbox: Mailbox,
    query: str = config.SEARCH_QUERY,
    subject: str = config.DONATION_SUBJECT,
) -> Iterator[FoundDonation]:
    """Yield a FoundDonation for each unread donation email that parses.

    A failing search propagates to the caller. Problems with a single
    message are logged and that message is skipped, leaving it unread.
    """
    message_ids = mailbox.search(query)

    for message_id in message_ids:
        try:
            message = mailbox.fetch(message_id)
            if message.subject != subject:
                logger.debug("Skipping message %s with subject %r", message_id, message.subject)
                continue

            details = extract_donation_details(message.body)
        except Exception as exc:
            logger.error("Error while processing message %s: %s", message_id, exc)
            continue

        if details is None:
            logger.warning("Could not extract donation details (messageId: %s)", message_id)
            continue

        yield FoundDonation(details=details, message_id=message_id)

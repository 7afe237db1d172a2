"""
Gmail service helpers.

Gmail operations used by the donation scan:
- searching messages with a Gmail query (all pages)
- fetching full messages
- marking messages as read

GmailMailbox wraps these behind the Mailbox interface.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

import config
from src.email_parser import parse_message
from src.google_auth import load_credentials
from src.models import MailMessage

logger = logging.getLogger(__name__)


def authenticate_gmail(
    token_path: str = config.TOKEN_PATH,
    client_secrets_file: str = config.CLIENT_SECRETS_FILE,
):
    """
    Build and return authenticated Gmail API service.
    """
    creds = load_credentials(token_path, client_secrets_file)
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def search_message_ids(service, query: str, page_size: int = config.MAX_RESULTS) -> List[str]:
    """
    Return ids of every message matching a Gmail search query.
    """
    ids: List[str] = []
    page_token: Optional[str] = None
    while True:
        try:
            response = (
                service.users()
                .messages()
                .list(userId="me", q=query, maxResults=page_size, pageToken=page_token)
                .execute()
            )
        except HttpError as err:
            logger.error("Failed to search messages (%s): %s", query, err)
            raise

        ids.extend(m["id"] for m in response.get("messages", []))
        page_token = response.get("nextPageToken")
        if not page_token:
            break

    logger.info("Found %d messages for query %s", len(ids), query)
    return ids


def get_message(service, message_id: str) -> Dict:
    """
    Get full Gmail message by ID.
    """
    try:
        return (
            service.users()
            .messages()
            .get(userId="me", id=message_id, format="full")
            .execute()
        )
    except HttpError as err:
        logger.error("Failed to fetch message %s: %s", message_id, err)
        raise


def mark_as_read(service, message_id: str) -> None:
    """
    Mark Gmail message as read by removing the UNREAD label.
    """
    try:
        (
            service.users()
            .messages()
            .modify(userId="me", id=message_id, body={"removeLabelIds": ["UNREAD"]})
            .execute()
        )
        logger.debug("Marked message %s as read", message_id)
    except HttpError as err:
        logger.error("Failed to mark message %s as read: %s", message_id, err)
        raise


class GmailMailbox:
    """Mailbox backed by the Gmail API."""

    def __init__(self, service) -> None:
        self._service = service

    def search(self, query: str) -> List[str]:
        return search_message_ids(self._service, query)

    def fetch(self, message_id: str) -> MailMessage:
        return parse_message(get_message(self._service, message_id))

    def mark_read(self, message_id: str) -> None:
        mark_as_read(self._service, message_id)

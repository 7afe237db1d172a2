"""
Slack workflow webhook notifications for new donations.
"""

from __future__ import annotations

import logging
from typing import Dict

import requests

import config
from src.ports import JsonPoster

logger = logging.getLogger(__name__)


def build_payload(date: str, amount: int, frequency: str) -> Dict[str, str]:
    """Workflow variables: every value is a string, amount like ``12,345円``."""
    return {
        "date": date,
        "amount": f"{amount:,}円",
        "frequency": frequency,
    }


class SlackNotifier:
    """Posts donation notifications to a Slack workflow webhook."""

    def __init__(
        self,
        webhook_url: str,
        http: JsonPoster = requests,
        timeout: float = config.WEBHOOK_TIMEOUT,
    ) -> None:
        self._webhook_url = webhook_url
        self._http = http
        self._timeout = timeout

    def send_donation_notification(self, date: str, amount: int, frequency: str) -> None:
        """
        POST the donation to the webhook.

        Raises:
            requests.RequestException: on transport errors or non-2xx responses.
        """
        payload = build_payload(date, amount, frequency)
        try:
            response = self._http.post(self._webhook_url, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Failed to send Slack notification: %s", exc)
            raise

        logger.info("Sent Slack notification: %s, %s円, %s", date, f"{amount:,}", frequency)

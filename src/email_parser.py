"""Email parsing utilities for Gmail message resources and donation bodies."""
from __future__ import annotations

import base64
import logging
import re
from typing import Dict, Optional

import html2text
from bs4 import BeautifulSoup

from src.date_utils import normalize_date
from src.models import DonationDetails, MailMessage

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"支援受付日時:\s*(.+)")
NAME_PATTERN = re.compile(r"支援付者名:\s*(.+)")
AMOUNT_PATTERN = re.compile(r"支援金額:\s*([0-9,]+)\s*円")
FREQUENCY_PATTERN = re.compile(r"支援頻度:\s*(.+)")

# Syncable appends extra columns after the name, separated by 2+ spaces
_NAME_TRAILER = re.compile(r"\s{2,}")


def _decode_body(data: Optional[str]) -> str:
    """Decode a base64url-encoded message body safely."""
    if not data:
        return ""
    try:
        decoded_bytes = base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
        return decoded_bytes.decode("utf-8", errors="replace")
    except ValueError as exc:
        logger.warning("Failed to decode body: %s", exc)
        return ""


def _html_to_text(html: str) -> str:
    """Convert HTML content to plain text using html2text with BeautifulSoup fallback."""
    if not html:
        return ""
    try:
        return html2text.HTML2Text(bodywidth=0).handle(html).strip()
    except Exception:
        soup = BeautifulSoup(html, "html.parser")
        return soup.get_text(separator="\n").strip()


def _extract_body_from_payload(payload: Dict) -> str:
    """Recursively extract the plain-text body.

    Prefers text/plain parts; falls back to HTML parts if needed.
    """
    mime_type = payload.get("mimeType", "")
    data = payload.get("body", {}).get("data")

    if payload.get("parts"):
        texts = []
        htmls = []
        for part in payload.get("parts", []):
            part_mime = part.get("mimeType", "")
            if part_mime.startswith("multipart/"):
                texts.append(_extract_body_from_payload(part))
            elif part_mime.startswith("text/plain"):
                texts.append(_decode_body(part.get("body", {}).get("data")))
            elif part_mime.startswith("text/html"):
                htmls.append(_decode_body(part.get("body", {}).get("data")))
        texts = [t for t in texts if t]
        if texts:
            return "\n\n".join(texts)
        if htmls:
            return "\n\n".join([_html_to_text(h) for h in htmls if h])
        return ""

    if mime_type.startswith("text/plain"):
        return _decode_body(data)

    if mime_type.startswith("text/html"):
        return _html_to_text(_decode_body(data))

    return ""


def _extract_header(headers, name: str) -> str:
    for header in headers:
        if header.get("name", "").lower() == name.lower():
            return header.get("value", "")
    return ""


def parse_message(message: Dict) -> MailMessage:
    """Parse a Gmail message resource into a MailMessage.

    Args:
        message: Gmail API message resource (format="full").
    """
    payload = message.get("payload", {})
    headers = payload.get("headers", [])

    return MailMessage(
        id=message.get("id", ""),
        subject=_extract_header(headers, "Subject").strip(),
        body=_extract_body_from_payload(payload),
    )


def extract_donation_details(body: str) -> Optional[DonationDetails]:
    """Pull the donation fields out of a Syncable notification body.

    Returns None when any of the four labeled lines is missing or the
    amount is not an integer.
    """
    date_match = DATE_PATTERN.search(body)
    name_match = NAME_PATTERN.search(body)
    amount_match = AMOUNT_PATTERN.search(body)
    frequency_match = FREQUENCY_PATTERN.search(body)

    if not (date_match and name_match and amount_match and frequency_match):
        return None

    try:
        amount = int(amount_match.group(1).strip().replace(",", ""))
    except ValueError:
        return None

    return DonationDetails(
        date=normalize_date(date_match.group(1).strip()),
        name=_NAME_TRAILER.split(name_match.group(1))[0].strip(),
        amount=amount,
        frequency=frequency_match.group(1).split(" ")[0].strip(),
    )

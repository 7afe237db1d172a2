"""Value objects passed between the scanner, the sinks and the orchestrator."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DonationDetails:
    date: str
    name: str
    amount: int
    frequency: str


@dataclass(frozen=True)
class MailMessage:
    """A fetched Gmail message reduced to the fields we read."""

    id: str
    subject: str
    body: str


@dataclass(frozen=True)
class FoundDonation:
    details: DonationDetails
    message_id: str


@dataclass
class RunSummary:
    found: int = 0
    processed: int = 0
    failed: int = 0
    disabled: bool = False

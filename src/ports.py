"""Interfaces the donation pipeline depends on.

The Google and HTTP bindings implement these; tests use in-memory fakes.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Protocol, Sequence, Union

from src.models import MailMessage

CellValue = Union[str, int, float, datetime]


class Mailbox(Protocol):
    def search(self, query: str) -> List[str]:
        """Return ids of messages matching a Gmail search query."""
        ...

    def fetch(self, message_id: str) -> MailMessage:
        ...

    def mark_read(self, message_id: str) -> None:
        ...


class Sheet(Protocol):
    def is_empty(self) -> bool:
        ...

    def append_row(self, values: Sequence[CellValue]) -> None:
        ...

    def format_date_column(self, column_index: int) -> None:
        ...


class Spreadsheet(Protocol):
    def get_sheet(self, sheet_name: str) -> Optional[Sheet]:
        """Return the named tab, or None when it does not exist."""
        ...


class JsonPoster(Protocol):
    """The subset of the ``requests`` module API used for webhooks."""

    def post(self, url: str, json: Any = None, **kwargs: Any) -> Any:
        ...

"""
Google Sheets helpers and the donation ledger.

Provides:
- an authenticated Sheets API client (same token.json as Gmail)
- GoogleSpreadsheet / GoogleSheet, the Sheets API behind the Spreadsheet port
- LedgerRecorder, which appends one row per donation

NOTE:
- Do NOT commit credentials.json / token.json
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

import config
from src.date_utils import parse_date
from src.google_auth import load_credentials
from src.ports import CellValue, Sheet, Spreadsheet

logger = logging.getLogger(__name__)

HEADER_ROW = ["日時", "寄付者名", "金額", "頻度"]
DATE_COLUMN = 0
DATE_TIME_PATTERN = "yyyy/mm/dd hh:mm:ss"

# Day zero of the Sheets serial date system
_SHEETS_EPOCH = datetime(1899, 12, 30)


class SheetNotFoundError(LookupError):
    """The configured tab does not exist in the spreadsheet."""


def authenticate_sheets(
    token_path: str = config.TOKEN_PATH,
    client_secrets_file: str = config.CLIENT_SECRETS_FILE,
):
    """
    Build and return authenticated Sheets API client.
    """
    creds = load_credentials(token_path, client_secrets_file)
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


def to_serial_date(value: datetime) -> float:
    """Convert a datetime to a Sheets serial number (wall-clock time kept)."""
    delta = value.replace(tzinfo=None) - _SHEETS_EPOCH
    return delta.days + delta.seconds / 86400


def _quote_sheet_name(sheet_name: str) -> str:
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'"


class GoogleSheet:
    """One tab of a spreadsheet, addressed through the Sheets v4 API."""

    def __init__(self, service, spreadsheet_id: str, sheet_id: int, title: str) -> None:
        self._service = service
        self._spreadsheet_id = spreadsheet_id
        self._sheet_id = sheet_id
        self.title = title

    @property
    def _range(self) -> str:
        return _quote_sheet_name(self.title)

    def is_empty(self) -> bool:
        """True when the first row of the tab holds no values."""
        try:
            response = (
                self._service.spreadsheets()
                .values()
                .get(spreadsheetId=self._spreadsheet_id, range=f"{self._range}!A1:D1")
                .execute()
            )
        except HttpError as err:
            logger.error("Failed to read first row of %s: %s", self.title, err)
            raise
        return not response.get("values")

    def append_row(self, values: Sequence[CellValue]) -> None:
        """
        Append a single row. Datetimes are written as serial dates.
        """
        cells: List = [to_serial_date(v) if isinstance(v, datetime) else v for v in values]
        try:
            (
                self._service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=f"{self._range}!A:D",
                    valueInputOption="RAW",
                    insertDataOption="INSERT_ROWS",
                    body={"values": [cells]},
                )
                .execute()
            )
        except HttpError as err:
            logger.error("Failed to append row to %s: %s", self.title, err)
            raise

    def format_date_column(self, column_index: int) -> None:
        request = {
            "repeatCell": {
                "range": {
                    "sheetId": self._sheet_id,
                    "startRowIndex": 1,
                    "startColumnIndex": column_index,
                    "endColumnIndex": column_index + 1,
                },
                "cell": {
                    "userEnteredFormat": {
                        "numberFormat": {"type": "DATE_TIME", "pattern": DATE_TIME_PATTERN}
                    }
                },
                "fields": "userEnteredFormat.numberFormat",
            }
        }
        try:
            (
                self._service.spreadsheets()
                .batchUpdate(spreadsheetId=self._spreadsheet_id, body={"requests": [request]})
                .execute()
            )
        except HttpError as err:
            logger.error("Failed to format date column of %s: %s", self.title, err)
            raise


class GoogleSpreadsheet:
    """Spreadsheet looked up by id through the Sheets v4 API.

    The API client is built by ``service_factory`` on first use, so an
    authentication failure surfaces as a failed lookup.
    """

    def __init__(self, service_factory: Callable[[], Any], spreadsheet_id: str) -> None:
        self._service_factory = service_factory
        self._service = None
        self._spreadsheet_id = spreadsheet_id

    def _get_service(self):
        if self._service is None:
            self._service = self._service_factory()
        return self._service

    def get_sheet(self, sheet_name: str) -> Optional[GoogleSheet]:
        service = self._get_service()
        try:
            response = (
                service.spreadsheets()
                .get(
                    spreadsheetId=self._spreadsheet_id,
                    fields="sheets.properties(sheetId,title)",
                )
                .execute()
            )
        except HttpError as err:
            logger.error("Failed to open spreadsheet %s: %s", self._spreadsheet_id, err)
            raise

        for sheet in response.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == sheet_name:
                return GoogleSheet(
                    service,
                    self._spreadsheet_id,
                    properties.get("sheetId", 0),
                    sheet_name,
                )
        return None


class LedgerRecorder:
    """Appends donations to a named tab of a spreadsheet."""

    def __init__(self, spreadsheet: Spreadsheet, sheet_name: str) -> None:
        self._spreadsheet = spreadsheet
        self._sheet_name = sheet_name

    def _get_sheet(self) -> Sheet:
        sheet = self._spreadsheet.get_sheet(self._sheet_name)
        if sheet is None:
            raise SheetNotFoundError(f"Sheet not found: {self._sheet_name}")
        return sheet

    def record_donation(self, date: str, name: str, amount: int, frequency: str) -> None:
        """
        Append ``[date, name, amount, frequency]``; the date is stored as a
        date value when it parses, otherwise as the raw string.
        """
        try:
            sheet = self._get_sheet()
            parsed = parse_date(date)
            sheet.append_row([parsed or date, name, amount, frequency])
        except Exception as exc:
            logger.error("Failed to record donation in Google Sheets: %s", exc)
            raise

        logger.info("Recorded donation in Google Sheets: %s, %s円", name, f"{amount:,}")

    def ensure_headers(self) -> None:
        """Write the header row to an empty sheet and apply the date format. Never raises."""
        try:
            sheet = self._get_sheet()
            if sheet.is_empty():
                sheet.append_row(HEADER_ROW)
                logger.info("Added header row to %s", self._sheet_name)
            sheet.format_date_column(DATE_COLUMN)
        except Exception as exc:
            logger.error("Failed to check/add header row: %s", exc)

"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can be used as a remote backend because:
1. The ledger survives a lost laptop (Google's infrastructure)
2. No database setup required
3. The raw snapshot can be inspected directly in Sheets

TRADEOFFS:
- A single cell holds at most 50,000 characters, which caps the ledger
  at a few hundred records per snapshot
- No transactions (one key per row keeps writes to a single row)

The worksheet has one row per key:  key | value | updated_at
"""

from datetime import datetime, timezone
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_ledger.config import GoogleSheetsSettings, get_settings
from finance_ledger.services.storage.interface import (
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
)


STORE_COLUMNS = ["key", "value", "updated_at"]

# Google Sheets per-cell character limit
MAX_CELL_CHARS = 50_000


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.store_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.store_sheet_name,
                rows=100,
                cols=len(STORE_COLUMNS),
            )
            sheet.append_row(STORE_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStoreInterface):
    """
    Google Sheets implementation of key-value storage.

    Keys live in column A, values in column B.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _find_row(self, sheet: gspread.Worksheet, key: str) -> tuple[Optional[int], list]:
        """Return (1-based row number, row values) for a key, skipping the header."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
            if row and row[0] == key:
                return idx, row
        return None, []

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(gspread.exceptions.APIError),
        reraise=True,
    )
    def _write(self, key: str, value: str) -> None:
        sheet = self._client.get_store_sheet()
        row_number, _ = self._find_row(sheet, key)
        updated_at = datetime.now(timezone.utc).isoformat()

        if row_number is None:
            sheet.append_row([key, value, updated_at], value_input_option="RAW")
        else:
            sheet.update(
                range_name=f"B{row_number}:C{row_number}",
                values=[[value, updated_at]],
                value_input_option="RAW",
            )

    def get(self, key: str) -> Optional[str]:
        """Read a value by key."""
        try:
            sheet = self._client.get_store_sheet()
            row_number, row = self._find_row(sheet, key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read key {key!r}: {e}")

        if row_number is None or len(row) < 2:
            return None
        return row[1]

    def set(self, key: str, value: str) -> bool:
        """Write a value, appending a row for new keys."""
        if len(value) > MAX_CELL_CHARS:
            raise StorageError(
                f"Value for {key!r} is {len(value)} characters; "
                f"Google Sheets cells hold at most {MAX_CELL_CHARS}"
            )

        try:
            self._write(key, value)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write key {key!r}: {e}")

    def delete(self, key: str) -> bool:
        """Delete the row holding a key."""
        try:
            sheet = self._client.get_store_sheet()
            row_number, _ = self._find_row(sheet, key)
            if row_number is None:
                return False
            sheet.delete_rows(row_number)
            return True
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete key {key!r}: {e}")

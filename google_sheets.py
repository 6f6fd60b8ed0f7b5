import json
import logging
from typing import Dict, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import SCOPES, Settings
from exceptions import ReadFailed, StoreUnavailable, WriteFailed

logger = logging.getLogger(__name__)


def build_credentials(settings: Settings) -> service_account.Credentials:
    """Service account credentials from GOOGLE_CREDENTIALS or email + key"""
    if settings.GOOGLE_CREDENTIALS:
        info = json.loads(settings.GOOGLE_CREDENTIALS)
    else:
        if not settings.GOOGLE_SERVICE_ACCOUNT_EMAIL or not settings.GOOGLE_PRIVATE_KEY:
            raise ValueError("GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY must be set")
        info = {
            "type": "service_account",
            "client_email": settings.GOOGLE_SERVICE_ACCOUNT_EMAIL,
            "private_key": settings.GOOGLE_PRIVATE_KEY,
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)


def get_error_details(error: HttpError) -> str:
    content = getattr(error, 'content', None)
    if isinstance(content, bytes):
        return content.decode('utf-8', errors='replace')
    return str(content or error)


def column_letter(index: int) -> str:
    """1 -> A, 27 -> AA"""
    letters = ''
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def quote_title(title: str) -> str:
    return "'" + title.replace("'", "''") + "'"


class SheetsStore:
    """Google Sheets API v4 backed submission store.

    The first sheet of the spreadsheet is the submissions table; its first row
    is the header. The discovery service is built once on open() and reused,
    so a single instance can serve a long-lived process.
    """

    def __init__(self, spreadsheet_id: str, credentials_factory, service=None):
        self.spreadsheet_id = spreadsheet_id
        self._credentials_factory = credentials_factory
        self._service = service

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsStore":
        return cls(settings.GOOGLE_SPREADSHEET_ID, lambda: build_credentials(settings))

    def open(self) -> None:
        if self._service is not None:
            return
        if not self.spreadsheet_id:
            raise StoreUnavailable("open", "GOOGLE_SPREADSHEET_ID not set")
        try:
            credentials = self._credentials_factory()
            self._service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)
        except (ValueError, TypeError, AttributeError, KeyError, GoogleAuthError) as e:
            raise StoreUnavailable("open", str(e)) from e
        logger.info(f"Connected to spreadsheet {self.spreadsheet_id}")

    @property
    def service(self):
        if self._service is None:
            self.open()
        return self._service

    def _execute(self, request, operation: str, error_cls):
        try:
            return request.execute()
        except HttpError as error:
            raise error_cls(operation, get_error_details(error)) from error
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            raise StoreUnavailable(operation, str(e)) from e

    def first_table(self) -> Optional[str]:
        sheet_metadata = self._execute(
            self.service.spreadsheets().get(
                spreadsheetId=self.spreadsheet_id,
                fields="sheets(properties(title,index))"
            ),
            "load spreadsheet",
            StoreUnavailable,
        )
        sheets = sorted(
            (s['properties'] for s in sheet_metadata.get('sheets', [])),
            key=lambda props: props.get('index', 0),
        )
        return sheets[0]['title'] if sheets else None

    def create_table(self, title: str) -> str:
        self._execute(
            self.service.spreadsheets().batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={'requests': [{'addSheet': {'properties': {'title': title}}}]}
            ),
            "add sheet",
            WriteFailed,
        )
        logger.info(f"Created sheet '{title}'")
        return title

    def _values(self, table: str, operation: str) -> List[List[str]]:
        result = self._execute(
            self.service.spreadsheets().values().get(
                spreadsheetId=self.spreadsheet_id,
                range=quote_title(table)
            ),
            operation,
            ReadFailed,
        )
        return result.get('values', [])

    def row_count(self, table: str) -> int:
        return len(self._values(table, "count rows"))

    def set_header_row(self, table: str, columns: List[str]) -> None:
        self._execute(
            self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_title(table)}!A1:{column_letter(len(columns))}1",
                valueInputOption='RAW',
                body={'values': [columns]}
            ),
            "write header row",
            WriteFailed,
        )

    def append_row(self, table: str, values: List[str]) -> None:
        # RAW keeps phone numbers and timestamps as the submitted text
        self._execute(
            self.service.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=f"{quote_title(table)}!A1",
                valueInputOption='RAW',
                insertDataOption='INSERT_ROWS',
                body={'values': [values]}
            ),
            "append row",
            WriteFailed,
        )

    def list_rows(self, table: str) -> List[Dict[str, str]]:
        values = self._values(table, "list rows")
        if not values:
            return []
        header, data = values[0], values[1:]
        # Sheets drops trailing empty cells, so short rows are padded
        return [
            {column: (row[i] if i < len(row) else '') for i, column in enumerate(header)}
            for row in data
        ]

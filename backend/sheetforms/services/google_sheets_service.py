"""
Google Sheets Service - Row level read/write against a spreadsheet
"""

import logging
import re
from typing import Any, Dict, List, Optional
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheetforms.config import settings
from sheetforms.core.errors import (
    SheetFormsError,
    Forbidden,
    InvalidArgument,
    NotFound,
    Unknown,
)

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Fixed rectangular span every row operation works on
FIRST_COLUMN = "A"
LAST_COLUMN = "Z"
DATA_RANGE = f"{FIRST_COLUMN}:{LAST_COLUMN}"

SPREADSHEET_ID_PATTERN = re.compile(r'[A-Za-z0-9_-]+')
SPREADSHEET_URL_PATTERN = re.compile(r'/spreadsheets/d/([A-Za-z0-9_-]+)')


class AccessTokenCredentials(Credentials):
    """Credentials that only carry a session's current access token.

    Refreshing is the session service's job, so the client never refreshes.
    """

    def __init__(self, access_token: str):
        super().__init__()
        self.token = access_token

    def refresh(self, request):
        raise NotImplementedError("Access token refresh not supported by this class.")

    def apply(self, headers, token=None):
        headers['Authorization'] = f'Bearer {token or self.token}'

    def before_request(self, request, method, url, headers):
        self.apply(headers)

    @property
    def expired(self):
        return False

    @property
    def valid(self):
        return True


class RowPosition:
    """0-based position of a row inside the sequence returned by read_all.

    Google Sheets addresses the same row two other ways: A1 notation is
    1-based and dimension ranges are 0-based. Every conversion goes through
    this class.
    """

    def __init__(self, position: int):
        if isinstance(position, bool) or not isinstance(position, int):
            raise InvalidArgument("Row index must be an integer")
        if position < 0:
            raise InvalidArgument("Row index must not be negative")
        self.position = position

    @property
    def a1_row(self) -> int:
        return self.position + 1

    @property
    def dimension_index(self) -> int:
        return self.position

    def a1_range(self) -> str:
        row = self.a1_row
        return f"{FIRST_COLUMN}{row}:{LAST_COLUMN}{row}"

    def __repr__(self):
        return f"RowPosition({self.position})"


def column_letter(count: int) -> str:
    """Return the A1 column letters of the 1-based column number"""
    if count < 1:
        raise InvalidArgument("Column number must be positive")
    letters = ""
    while count:
        count, remainder = divmod(count - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def quote_sheet_name(sheet_name: str) -> str:
    return "'" + sheet_name.replace("'", "''") + "'"


def extract_spreadsheet_id(value: str) -> Optional[str]:
    """
    Extract spreadsheet ID from a Google Sheets URL or a bare ID

    Args:
        value: Google Sheets URL or spreadsheet ID

    Returns:
        Spreadsheet ID or None
    """
    value = (value or "").strip()
    match = SPREADSHEET_URL_PATTERN.search(value)
    if match:
        return match.group(1)
    if SPREADSHEET_ID_PATTERN.fullmatch(value):
        return value
    return None


def translate_error(error: Exception, spreadsheet_id: str, action: str) -> SheetFormsError:
    """Reclassify a Google client failure into the service error taxonomy"""
    if isinstance(error, HttpError):
        status = error.resp.status
        logger.error(f"Sheets API error while {action} {spreadsheet_id}: HTTP {status} {error}")
        if status == 403:
            return Forbidden(
                "You do not have permission to access this spreadsheet", cause=error
            )
        if status == 404:
            return NotFound("Spreadsheet not found", cause=error)
        if status == 400:
            return InvalidArgument(f"Invalid request for spreadsheet {spreadsheet_id}", cause=error)
        return Unknown(f"Google Sheets request failed while {action}", cause=error)

    logger.error(f"Unexpected failure while {action} {spreadsheet_id}: {error}")
    return Unknown(f"Google Sheets request failed while {action}: {error}", cause=error)


class GoogleSheetsService:
    """Service for interacting with Google Sheets API"""

    def __init__(self, credentials: Credentials):
        self.credentials = credentials
        self.sheets_service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)

    @classmethod
    def from_access_token(cls, access_token: str) -> "GoogleSheetsService":
        return cls(AccessTokenCredentials(access_token))

    @classmethod
    def from_service_account_file(cls, path: str) -> "GoogleSheetsService":
        try:
            credentials = service_account.Credentials.from_service_account_file(
                path, scopes=SHEETS_SCOPES
            )
        except (OSError, ValueError, GoogleAuthError) as e:
            logger.error(f"Failed to load service account credentials from {path}: {e}")
            raise Unknown("Service account credentials could not be loaded", cause=e) from e
        return cls(credentials)

    def _execute(self, request, spreadsheet_id: str, action: str):
        try:
            return request.execute()
        except (HttpError, GoogleAuthError, OSError) as e:
            raise translate_error(e, spreadsheet_id, action) from e

    def _check_id(self, spreadsheet_id: str) -> str:
        if not spreadsheet_id or not SPREADSHEET_ID_PATTERN.fullmatch(spreadsheet_id):
            raise InvalidArgument("Invalid spreadsheet ID")
        return spreadsheet_id

    def get_metadata(self, spreadsheet_id: str) -> Dict:
        """
        Get spreadsheet metadata

        Args:
            spreadsheet_id: Spreadsheet ID

        Returns:
            Dictionary with the spreadsheet title and its sheets
        """
        self._check_id(spreadsheet_id)
        metadata = self._execute(
            self.sheets_service.spreadsheets().get(spreadsheetId=spreadsheet_id),
            spreadsheet_id,
            "fetching metadata of",
        )
        return {
            'spreadsheet_id': spreadsheet_id,
            'title': metadata.get('properties', {}).get('title', ''),
            'sheets': [
                {
                    'title': sheet['properties']['title'],
                    'index': sheet['properties'].get('index', 0),
                    'sheet_id': sheet['properties'].get('sheetId', 0),
                }
                for sheet in metadata.get('sheets', [])
            ]
        }

    def validate_access(self, spreadsheet_id: str) -> Dict:
        """
        Check that the spreadsheet exists and these credentials can read it

        Raises:
            InvalidArgument: malformed ID
            Forbidden: access denied
            NotFound: no such spreadsheet
            Unknown: any other failure
        """
        metadata = self.get_metadata(spreadsheet_id)
        logger.info(f"Validated access to spreadsheet {spreadsheet_id} ({metadata['title']})")
        return metadata

    def read_all(self, spreadsheet_id: str, sheet_name: Optional[str] = None) -> List[List[str]]:
        """Return every row of the A:Z range (first sheet unless named); an empty sheet gives []"""
        self._check_id(spreadsheet_id)
        data_range = f"{quote_sheet_name(sheet_name)}!{DATA_RANGE}" if sheet_name else DATA_RANGE
        result = self._execute(
            self.sheets_service.spreadsheets().values().get(
                spreadsheetId=spreadsheet_id,
                range=data_range,
            ),
            spreadsheet_id,
            "reading",
        )
        values = result.get('values', [])
        logger.debug(f"Read {len(values)} rows from {spreadsheet_id}")
        return values

    def append_row(self, spreadsheet_id: str, cells: List[Any]) -> Dict:
        """Append one row after the used range, values parsed as if typed by a user"""
        self._check_id(spreadsheet_id)
        result = self._execute(
            self.sheets_service.spreadsheets().values().append(
                spreadsheetId=spreadsheet_id,
                range=DATA_RANGE,
                valueInputOption="USER_ENTERED",
                insertDataOption="INSERT_ROWS",
                body={'values': [list(cells)]},
            ),
            spreadsheet_id,
            "appending to",
        )
        logger.info(f"Appended row of {len(cells)} cells to {spreadsheet_id}")
        return result

    def _require_row(self, spreadsheet_id: str, row: RowPosition, sheet_name: Optional[str] = None):
        count = len(self.read_all(spreadsheet_id, sheet_name))
        if row.position >= count:
            raise NotFound(f"Row {row.position} does not exist (sheet has {count} rows)")

    def _sheet_title(self, spreadsheet_id: str, sheet_id: int) -> str:
        for sheet in self.get_metadata(spreadsheet_id)['sheets']:
            if sheet['sheet_id'] == sheet_id:
                return sheet['title']
        raise NotFound(f"Sheet with ID {sheet_id} not found")

    def update_row(self, spreadsheet_id: str, position: int, cells: List[Any]) -> Dict:
        """Overwrite the full A:Z span of an existing row"""
        self._check_id(spreadsheet_id)
        row = RowPosition(position)
        self._require_row(spreadsheet_id, row)
        result = self._execute(
            self.sheets_service.spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=row.a1_range(),
                valueInputOption="USER_ENTERED",
                body={'values': [list(cells)]},
            ),
            spreadsheet_id,
            "updating",
        )
        logger.info(f"Updated row {row.position} (A1 row {row.a1_row}) of {spreadsheet_id}")
        return result

    def delete_row(self, spreadsheet_id: str, position: int) -> Dict:
        """Structurally delete one row from the sheet with ID DELETE_SHEET_ID"""
        self._check_id(spreadsheet_id)
        row = RowPosition(position)
        sheet_name = self._sheet_title(spreadsheet_id, settings.DELETE_SHEET_ID)
        self._require_row(spreadsheet_id, row, sheet_name)
        body = {
            'requests': [{
                'deleteDimension': {
                    'range': {
                        'sheetId': settings.DELETE_SHEET_ID,
                        'dimension': 'ROWS',
                        'startIndex': row.dimension_index,
                        'endIndex': row.dimension_index + 1,
                    }
                }
            }]
        }
        result = self._execute(
            self.sheets_service.spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id,
                body=body,
            ),
            spreadsheet_id,
            "deleting a row from",
        )
        logger.info(f"Deleted row {row.position} of {spreadsheet_id}")
        return result

    def write_header(self, spreadsheet_id: str, header_cells: List[str],
                     sheet_name: Optional[str] = None) -> Dict:
        """
        Overwrite row 1 of the named sheet with literal values

        Args:
            spreadsheet_id: Spreadsheet ID
            header_cells: Column names, written as-is
            sheet_name: Sheet title (defaults to HEADER_SHEET_NAME)

        Returns:
            Raw update result
        """
        if not header_cells:
            raise InvalidArgument("Header must contain at least one column")
        sheet_name = sheet_name or settings.HEADER_SHEET_NAME

        metadata = self.get_metadata(spreadsheet_id)
        if not any(sheet['title'] == sheet_name for sheet in metadata['sheets']):
            raise NotFound(f"Sheet '{sheet_name}' not found")

        header_range = (
            f"{quote_sheet_name(sheet_name)}!"
            f"{FIRST_COLUMN}1:{column_letter(len(header_cells))}1"
        )
        result = self._execute(
            self.sheets_service.spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=header_range,
                valueInputOption="RAW",
                body={'values': [list(header_cells)]},
            ),
            spreadsheet_id,
            "writing the header of",
        )
        logger.info(f"Wrote header {header_range} of {spreadsheet_id}")
        return result


def get_validation_service(access_token: str) -> GoogleSheetsService:
    """
    Service used to check spreadsheets when a form is created

    Uses the configured service account when one is set, otherwise the
    signed-in user's access token.
    """
    if settings.service_account_enabled:
        return GoogleSheetsService.from_service_account_file(settings.GOOGLE_SERVICE_ACCOUNT_FILE)
    return GoogleSheetsService.from_access_token(access_token)

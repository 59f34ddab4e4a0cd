"""
Shared fixtures: environment, an in-memory Google Sheets API, sessions
"""

import os
import re
import tempfile

# Required settings must exist before any sheetforms module is imported
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("FORMS_FILE", os.path.join(tempfile.mkdtemp(), "forms.json"))

import pytest
from unittest.mock import Mock, patch
from googleapiclient.errors import HttpError


def http_error(status: int, message: str = "error") -> HttpError:
    content = ('{"error": {"code": %d, "message": "%s"}}' % (status, message)).encode()
    return HttpError(Mock(status=status, reason=message), content)


class FakeRequest:
    """Mimics a googleapiclient request: work happens on execute()"""

    def __init__(self, action):
        self.action = action

    def execute(self):
        return self.action()


class FakeSheetsApi:
    """Enough of the Sheets v4 resource tree to drive GoogleSheetsService"""

    def __init__(self):
        self.spreadsheets_data = {}
        self.errors = {}
        self.calls = []

    def add_spreadsheet(self, spreadsheet_id, rows=None, sheets=("Sheet1",), title="Test sheet"):
        self.spreadsheets_data[spreadsheet_id] = {
            'title': title,
            'sheets': list(sheets),
            'rows': [list(row) for row in (rows or [])],
        }
        return self.spreadsheets_data[spreadsheet_id]

    def rows(self, spreadsheet_id):
        return self.spreadsheets_data[spreadsheet_id]['rows']

    def _lookup(self, spreadsheet_id):
        if spreadsheet_id in self.errors:
            error = self.errors[spreadsheet_id]
            raise error if isinstance(error, Exception) else http_error(error)
        if spreadsheet_id not in self.spreadsheets_data:
            raise http_error(404, "Requested entity was not found.")
        return self.spreadsheets_data[spreadsheet_id]

    # Resource tree
    def spreadsheets(self):
        return self

    def values(self):
        return FakeValues(self)

    def get(self, spreadsheetId):
        self.calls.append(('spreadsheets.get', spreadsheetId))

        def action():
            data = self._lookup(spreadsheetId)
            return {
                'properties': {'title': data['title']},
                'sheets': [
                    {'properties': {'title': title, 'index': index, 'sheetId': index}}
                    for index, title in enumerate(data['sheets'])
                ],
            }
        return FakeRequest(action)

    def batchUpdate(self, spreadsheetId, body):
        self.calls.append(('spreadsheets.batchUpdate', spreadsheetId, body))

        def action():
            rows = self._lookup(spreadsheetId)['rows']
            for request in body['requests']:
                span = request['deleteDimension']['range']
                del rows[span['startIndex']:span['endIndex']]
            return {'spreadsheetId': spreadsheetId, 'replies': [{}]}
        return FakeRequest(action)


class FakeValues:

    def __init__(self, api: FakeSheetsApi):
        self.api = api

    def get(self, spreadsheetId, range):
        self.api.calls.append(('values.get', spreadsheetId, range))

        def action():
            rows = self.api._lookup(spreadsheetId)['rows']
            result = {'range': f"Sheet1!{range}", 'majorDimension': 'ROWS'}
            if rows:
                result['values'] = [list(row) for row in rows]
            return result
        return FakeRequest(action)

    def append(self, spreadsheetId, range, valueInputOption, insertDataOption, body):
        self.api.calls.append(('values.append', spreadsheetId, range, valueInputOption, body))

        def action():
            rows = self.api._lookup(spreadsheetId)['rows']
            rows.extend(list(row) for row in body['values'])
            return {
                'spreadsheetId': spreadsheetId,
                'updates': {'updatedRange': f"Sheet1!A{len(rows)}", 'updatedRows': 1},
            }
        return FakeRequest(action)

    def update(self, spreadsheetId, range, valueInputOption, body):
        self.api.calls.append(('values.update', spreadsheetId, range, valueInputOption, body))

        def action():
            rows = self.api._lookup(spreadsheetId)['rows']
            row_number = int(re.search(r'[A-Z]+(\d+):', range).group(1))
            while len(rows) < row_number:
                rows.append([])
            rows[row_number - 1] = list(body['values'][0])
            return {'spreadsheetId': spreadsheetId, 'updatedRange': range, 'updatedRows': 1}
        return FakeRequest(action)


@pytest.fixture
def fake_api():
    """In-memory Sheets API wired into every GoogleSheetsService built during the test"""
    api = FakeSheetsApi()
    with patch('sheetforms.services.google_sheets_service.build', return_value=api):
        yield api


@pytest.fixture
def sheets_service(fake_api):
    from sheetforms.services.google_sheets_service import GoogleSheetsService
    return GoogleSheetsService.from_access_token("test_token")


@pytest.fixture
def registry(tmp_path):
    from sheetforms.services.form_registry import FormRegistry
    return FormRegistry(tmp_path / "data" / "forms.json")


@pytest.fixture
def columns():
    return [
        {"name": "Name", "type": "text", "input": True, "editable": True, "required": True},
        {"name": "Email", "type": "email", "input": True, "editable": True},
        {"name": "Date", "type": "date", "input": True, "editable": True},
    ]

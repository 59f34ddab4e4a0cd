"""Form registry backed by a single JSON document"""
import json
import logging
import os
import tempfile
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from filelock import FileLock
from pydantic import ValidationError

from sheetforms.core.errors import InvalidArgument, NotFound, Unknown
from sheetforms.models.form import Column, Form
from sheetforms.services.google_sheets_service import GoogleSheetsService

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class FormRegistry:
    """List of forms persisted as a whole on every write.

    The document may be shared by several processes, so it is re-read under
    `<path>.lock` for every read and every mutation. Mutations run as a
    read-modify-write transaction: the change is applied to the list read
    under the lock, written to disk, and memory is replaced only after the
    write succeeds.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        self._file_lock = FileLock(f"{self.path}.lock")
        self._last_id = 0
        self._forms: List[Form] = self._reload()

    def _load(self) -> List[Form]:
        """Read the store; a missing or unreadable file yields an empty registry"""
        if not self.path.exists():
            logger.debug(f"Form registry file does not exist yet: {self.path}")
            return []
        try:
            documents = json.loads(self.path.read_text(encoding='utf-8'))
            forms = [Form.model_validate(document) for document in documents]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            logger.error(f"Failed to load form registry {self.path}: {e}")
            return []
        logger.debug(f"Loaded {len(forms)} forms from {self.path}")
        return forms

    def _reload(self) -> List[Form]:
        with self._lock, self._file_lock:
            self._forms = self._load()
            return self._forms

    def _persist(self, forms: List[Form]):
        """Write the whole list to a temp file and atomically swap it in"""
        data = json.dumps([form.to_document() for form in forms], indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error(f"Failed to save form registry {self.path}: {e}")
            raise Unknown("Failed to save form data", cause=e) from e
        logger.debug(f"Saved {len(forms)} forms to {self.path}")

    @contextmanager
    def _transaction(self) -> Iterator[List[Form]]:
        with self._lock, self._file_lock:
            working = self._load()
            yield working
            self._persist(working)
            self._forms = working

    def _next_id(self, forms: List[Form]) -> str:
        """Milliseconds since epoch, bumped so ids stay strictly increasing"""
        candidate = int(time.time() * 1000)
        known = max((int(f.id) for f in forms if f.id.isdigit()), default=0)
        candidate = max(candidate, self._last_id + 1, known + 1)
        self._last_id = candidate
        return str(candidate)

    def list(self) -> List[Form]:
        """All forms in insertion order"""
        return list(self._reload())

    def get(self, form_id: str) -> Form:
        for form in self._reload():
            if form.id == form_id:
                return form
        raise NotFound(f"Form {form_id} not found")

    def create(
        self,
        name: Optional[str],
        template_id: Optional[str],
        spreadsheet_id: Optional[str],
        columns: Optional[List],
        gateway: Optional[GoogleSheetsService],
    ) -> Form:
        """
        Register a new form after checking its spreadsheet is reachable

        Args:
            name: Display name
            template_id: Template the columns came from (not checked)
            spreadsheet_id: Google spreadsheet backing the form
            columns: Column definitions (Column models or dicts)
            gateway: Sheets service whose credentials must reach the spreadsheet;
                only used once every required field is present

        Returns:
            The created form
        """
        missing = [
            field for field, value in (
                ('name', name),
                ('templateId', template_id),
                ('spreadsheetId', spreadsheet_id),
                ('columns', columns),
            )
            if not value
        ]
        if missing:
            raise InvalidArgument(f"Missing required fields: {', '.join(missing)}")

        try:
            parsed_columns = [
                column if isinstance(column, Column) else Column.model_validate(column)
                for column in columns
            ]
        except ValidationError as e:
            raise InvalidArgument(f"Invalid column definition: {e.errors()[0]['msg']}") from e

        try:
            gateway.validate_access(spreadsheet_id)
        except NotFound as e:
            raise InvalidArgument("Invalid spreadsheet ID", cause=e) from e

        with self._transaction() as forms:
            now = _utc_now_iso()
            form = Form(
                id=self._next_id(forms),
                name=name,
                template_id=template_id,
                spreadsheet_id=spreadsheet_id,
                columns=parsed_columns,
                created_at=now,
                updated_at=now,
            )
            forms.append(form)

        logger.info(f"Created form {form.id} ({form.name}) for spreadsheet {spreadsheet_id}")
        return form

    def delete(self, form_id: str) -> bool:
        with self._transaction() as forms:
            for index, form in enumerate(forms):
                if form.id == form_id:
                    del forms[index]
                    break
            else:
                raise NotFound(f"Form {form_id} not found")

        logger.info(f"Deleted form {form_id}")
        return True

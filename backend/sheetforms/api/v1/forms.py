"""Form registry API endpoints"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
import logging

from sheetforms.api.deps import get_form_registry
from sheetforms.core.errors import InvalidArgument
from sheetforms.core.security import get_current_session, get_sheets_service
from sheetforms.models.form import Form
from sheetforms.services.form_registry import FormRegistry
from sheetforms.services.form_rows import build_row, header_cells
from sheetforms.services.google_sheets_service import (
    GoogleSheetsService,
    extract_spreadsheet_id,
    get_validation_service,
)
from sheetforms.services.session_service import Session

router = APIRouter(dependencies=[Depends(get_current_session)])
logger = logging.getLogger(__name__)


class FormCreate(BaseModel):
    """Request to create a form; presence of each field is checked by the registry"""
    name: Optional[str] = None
    template_id: Optional[str] = Field(default=None, alias="templateId")
    spreadsheet_id: Optional[str] = Field(default=None, alias="spreadsheetId")
    columns: Optional[List[Dict[str, Any]]] = None

    class Config:
        populate_by_name = True


class SpreadsheetRef(BaseModel):
    """Spreadsheet ID or full Google Sheets URL"""
    spreadsheet_id: Optional[str] = Field(default=None, alias="spreadsheetId")

    class Config:
        populate_by_name = True


def _resolve_spreadsheet_id(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    return extract_spreadsheet_id(value) or value


@router.get("", response_model=List[Form], response_model_exclude_none=True, include_in_schema=False)
@router.get("/", response_model=List[Form], response_model_exclude_none=True)
def list_forms(registry: FormRegistry = Depends(get_form_registry)):
    """List all forms"""
    return registry.list()


@router.post("", response_model=Form, status_code=201, response_model_exclude_none=True, include_in_schema=False)
@router.post("/", response_model=Form, status_code=201, response_model_exclude_none=True)
def create_form(
    body: FormCreate,
    session: Session = Depends(get_current_session),
    registry: FormRegistry = Depends(get_form_registry),
):
    """Create a form after checking its spreadsheet is reachable"""
    spreadsheet_id = _resolve_spreadsheet_id(body.spreadsheet_id)
    # Missing fields are reported by the registry before any credentials load
    complete = all((body.name, body.template_id, spreadsheet_id, body.columns))
    gateway = get_validation_service(session.access_token) if complete else None
    return registry.create(
        name=body.name,
        template_id=body.template_id,
        spreadsheet_id=spreadsheet_id,
        columns=body.columns,
        gateway=gateway,
    )


@router.post("/validate-spreadsheet")
def validate_spreadsheet(
    body: SpreadsheetRef,
    session: Session = Depends(get_current_session),
):
    """Check a spreadsheet exists and is readable"""
    spreadsheet_id = _resolve_spreadsheet_id(body.spreadsheet_id)
    if not spreadsheet_id:
        raise InvalidArgument("Spreadsheet ID is required")
    metadata = get_validation_service(session.access_token).validate_access(spreadsheet_id)
    return {"message": "Spreadsheet is accessible", "spreadsheet": metadata}


@router.get("/{form_id}", response_model=Form, response_model_exclude_none=True)
def get_form(form_id: str, registry: FormRegistry = Depends(get_form_registry)):
    """Get form by ID"""
    return registry.get(form_id)


@router.delete("/{form_id}")
def delete_form(form_id: str, registry: FormRegistry = Depends(get_form_registry)):
    """Delete form"""
    registry.delete(form_id)
    return {"message": "Form deleted successfully"}


@router.post("/{form_id}/rows")
def add_form_row(
    form_id: str,
    values: Dict[str, Any],
    registry: FormRegistry = Depends(get_form_registry),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Append a row built from the form's input columns"""
    form = registry.get(form_id)
    cells = build_row(form, values)
    result = sheets.append_row(form.spreadsheet_id, cells)
    return {"message": "Row added", "data": result}


@router.post("/{form_id}/header")
def write_form_header(
    form_id: str,
    registry: FormRegistry = Depends(get_form_registry),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Write the form's column names as the spreadsheet's header row"""
    form = registry.get(form_id)
    headers = header_cells(form)
    sheets.write_header(form.spreadsheet_id, headers)
    return {"message": "Header row written", "headers": headers}

"""Spreadsheet row API endpoints

Rows are addressed by position: the 0-based index of the row in the list
returned by /sheet/read (position 0 is the header row when there is one).
"""
from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel, Field
from typing import Any, List, Optional
import logging

from sheetforms.config import settings
from sheetforms.core.errors import InvalidArgument
from sheetforms.core.security import get_sheets_service
from sheetforms.services.google_sheets_service import GoogleSheetsService
from sheetforms.services.row_view import positioned, search_rows, sort_rows

router = APIRouter()
logger = logging.getLogger(__name__)


class RowUpdate(BaseModel):
    """Request to overwrite one row"""
    row_index: int = Field(alias="rowIndex")
    data: List[Any]

    class Config:
        populate_by_name = True


class RowDelete(BaseModel):
    """Request to delete one row"""
    row_index: int = Field(alias="rowIndex")
    spreadsheet_id: str = Field(alias="spreadsheetId")

    class Config:
        populate_by_name = True


class HeaderCreate(BaseModel):
    """Request to write the header row"""
    headers: List[str]
    spreadsheet_id: Optional[str] = Field(default=None, alias="spreadsheetId")
    sheet_name: Optional[str] = Field(default=None, alias="sheetName")

    class Config:
        populate_by_name = True


class PositionedRow(BaseModel):
    position: int
    cells: List[Any]


@router.get("/read", response_model=List[List[Any]])
def read_rows(
    spreadsheet_id: str = Query(..., alias="spreadsheetId"),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Raw rows of the A:Z range"""
    return sheets.read_all(spreadsheet_id)


@router.get("/rows", response_model=List[PositionedRow])
def query_rows(
    spreadsheet_id: str = Query(..., alias="spreadsheetId"),
    q: Optional[str] = None,
    sort: Optional[int] = None,
    direction: str = Query("ascending", pattern="^(ascending|descending)$"),
    header: bool = True,
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Rows with their positions, filtered by `q` and sorted by column `sort`"""
    rows = positioned(sheets.read_all(spreadsheet_id), header=header)
    rows = search_rows(rows, q)
    return sort_rows(rows, sort, descending=direction == "descending")


@router.post("/add")
def add_row(
    spreadsheet_id: str = Query(..., alias="spreadsheetId"),
    values: List[Any] = Body(...),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Append one row"""
    result = sheets.append_row(spreadsheet_id, values)
    return {"message": "Row added", "data": result}


@router.put("/update")
def update_row(
    body: RowUpdate,
    spreadsheet_id: str = Query(..., alias="spreadsheetId"),
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Overwrite the row at a position"""
    result = sheets.update_row(spreadsheet_id, body.row_index, body.data)
    return {"message": "Row updated", "data": result}


@router.delete("/delete")
def delete_row(
    body: RowDelete,
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Delete the row at a position"""
    sheets.delete_row(body.spreadsheet_id, body.row_index)
    return {"message": "Row deleted successfully"}


@router.post("/create-header")
def create_header(
    body: HeaderCreate,
    sheets: GoogleSheetsService = Depends(get_sheets_service),
):
    """Overwrite row 1 of the header sheet with the given column names"""
    spreadsheet_id = body.spreadsheet_id or settings.GOOGLE_SHEET_ID
    if not spreadsheet_id:
        raise InvalidArgument("Spreadsheet ID is required")
    sheets.write_header(spreadsheet_id, body.headers, sheet_name=body.sheet_name)
    return {"message": "Header row written", "headers": body.headers}

"""
Form and column models
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class ColumnView(BaseModel):
    """Per-column display hints"""
    filterable: Optional[bool] = None


class Column(BaseModel):
    """A single column of a form's schema"""

    name: str
    type: str = "text"
    input: bool = True
    editable: bool = True
    required: Optional[bool] = None
    options: Optional[List[str]] = None
    view: Optional[ColumnView] = None


class Form(BaseModel):
    """Binding between a column schema and a Google spreadsheet"""

    id: str
    name: str
    template_id: str = Field(alias="templateId")
    spreadsheet_id: str = Field(alias="spreadsheetId")
    columns: List[Column]
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        """Serialize with the camelCase keys used on disk and over the wire"""
        return self.model_dump(by_alias=True, exclude_none=True)

    @property
    def input_columns(self) -> List[Column]:
        return [column for column in self.columns if column.input]

"""
Template model
"""

from typing import List
from pydantic import BaseModel, Field

from sheetforms.models.form import Column


class TemplateView(BaseModel):
    """Layout hints consumed by the UI"""
    layout: str = "table"
    searchable: bool = False
    filterable: bool = False


class Template(BaseModel):
    """Predefined, read-only column schema used to seed a new form"""

    id: str
    name: str
    description: str = ""
    columns: List[Column]
    view: TemplateView = Field(default_factory=TemplateView)

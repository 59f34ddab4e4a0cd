"""Models package"""
from sheetforms.models.form import Column, ColumnView, Form
from sheetforms.models.template import Template, TemplateView

__all__ = [
    "Column",
    "ColumnView",
    "Form",
    "Template",
    "TemplateView",
]

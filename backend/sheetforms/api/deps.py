"""Shared FastAPI dependencies"""
from typing import Optional

from sheetforms.config import settings
from sheetforms.services.form_registry import FormRegistry
from sheetforms.services.template_service import TemplateService

_form_registry: Optional[FormRegistry] = None


def init_form_registry() -> FormRegistry:
    """Load the registry from disk once, at process start"""
    global _form_registry
    _form_registry = FormRegistry(settings.forms_path)
    return _form_registry


def get_form_registry() -> FormRegistry:
    if _form_registry is None:
        return init_form_registry()
    return _form_registry


def get_template_service() -> TemplateService:
    return TemplateService(settings.templates_path)

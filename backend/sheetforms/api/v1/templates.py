"""Template catalog endpoint"""
from fastapi import APIRouter, Depends
from typing import List

from sheetforms.api.deps import get_template_service
from sheetforms.models.template import Template
from sheetforms.services.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=List[Template], include_in_schema=False)
@router.get("/", response_model=List[Template])
def list_templates(templates: TemplateService = Depends(get_template_service)):
    """List predefined column schemas. No auth required."""
    return templates.list_templates()

"""API v1 routes"""
from fastapi import APIRouter

from sheetforms.api.v1 import auth, config, forms, sheet, templates

router = APIRouter()

# Include sub-routers
router.include_router(config.router, tags=["config"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(forms.router, prefix="/forms", tags=["forms"])
router.include_router(sheet.router, prefix="/sheet", tags=["sheet"])
router.include_router(templates.router, prefix="/templates", tags=["templates"])

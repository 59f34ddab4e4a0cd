"""Public config endpoint for frontend (sign-in, feature flags)."""
from fastapi import APIRouter

from sheetforms.config import settings

router = APIRouter()


@router.get("/config")
def get_config():
    """Return public config: project name, login URL, validation mode. No auth required."""
    return {
        "project_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "login_url": f"{settings.API_V1_PREFIX}/auth/login",
        "service_account_validation": settings.service_account_enabled,
        "header_sheet_name": settings.HEADER_SHEET_NAME,
    }

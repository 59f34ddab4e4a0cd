"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path


PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Settings from environment. No org-specific defaults."""

    GOOGLE_CLIENT_ID: str
    GOOGLE_CLIENT_SECRET: str
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/api/v1/auth/callback"
    GOOGLE_AUTH_URI: str = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"

    # Service account used to validate spreadsheets instead of the user's token
    GOOGLE_SERVICE_ACCOUNT_FILE: Optional[str] = None

    # Fallback spreadsheet for header writes when the request names none
    GOOGLE_SHEET_ID: Optional[str] = None
    HEADER_SHEET_NAME: str = "Sheet1"
    DELETE_SHEET_ID: int = 0

    FORMS_FILE: str = "./data/forms.json"
    TEMPLATES_DIR: str = str(PACKAGE_DIR / "templates")

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    TOKEN_REFRESH_LEEWAY_SECONDS: int = 60
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: str = "http://localhost:3000"
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "SheetForms"
    VERSION: str = "1.0.0"

    @property
    def service_account_enabled(self) -> bool:
        """True if spreadsheet validation should use the configured service account."""
        return bool((self.GOOGLE_SERVICE_ACCOUNT_FILE or "").strip())

    @property
    def forms_path(self) -> Path:
        return Path(self.FORMS_FILE)

    @property
    def templates_path(self) -> Path:
        return Path(self.TEMPLATES_DIR)

    @property
    def oauth_scopes(self) -> list:
        return [
            "openid",
            "email",
            "profile",
            "https://www.googleapis.com/auth/spreadsheets",
            "https://www.googleapis.com/auth/drive.file",
        ]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from sheetforms.config import settings
from sheetforms.core.errors import Unauthenticated
from sheetforms.services.google_sheets_service import GoogleSheetsService
from sheetforms.services.session_service import Session, SessionService, session_service

security = HTTPBearer(auto_error=False)


def create_session_token(session: Session, expires_minutes: Optional[int] = None) -> str:
    expires_minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode = {"sid": session.id, "email": session.email, "exp": expire}

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def get_session_service() -> SessionService:
    return session_service


def get_current_session(
    token: Optional[HTTPAuthorizationCredentials] = Depends(security),
    sessions: SessionService = Depends(get_session_service),
) -> Session:
    """Resolve the bearer token to a live session with a usable access token"""
    if token is None:
        raise Unauthenticated("Authentication required")

    try:
        payload = jwt.decode(
            token.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        raise Unauthenticated("Invalid or expired session token")

    session_id = payload.get("sid")
    session = sessions.get_session(session_id) if session_id else None
    if not session:
        raise Unauthenticated("Session not found")

    sessions.ensure_fresh(session)
    if session.failed:
        raise Unauthenticated(f"{session.error}: please sign in again")

    return session


def get_sheets_service(session: Session = Depends(get_current_session)) -> GoogleSheetsService:
    return GoogleSheetsService.from_access_token(session.access_token)

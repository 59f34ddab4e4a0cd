"""Sign-in and session endpoints"""
from urllib.parse import urlencode
import logging

import requests
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import RedirectResponse
from google.auth.exceptions import GoogleAuthError
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from pydantic import BaseModel
from typing import Optional

from sheetforms.config import settings
from sheetforms.core.security import (
    create_session_token,
    get_current_session,
    get_session_service,
)
from sheetforms.services.session_service import Session, SessionService

router = APIRouter()
logger = logging.getLogger(__name__)


class CredentialPair(BaseModel):
    """Tokens already exchanged by a front-end OAuth library"""
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: int = 3600
    email: Optional[str] = None
    name: Optional[str] = None


class SessionTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: float


def _session_token_response(session: Session) -> SessionTokenResponse:
    return SessionTokenResponse(
        access_token=create_session_token(session),
        expires_at=session.expires_at,
    )


@router.get("/login")
def google_login_redirect():
    """Redirect to Google's consent screen (offline access for a refresh token)"""
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(settings.oauth_scopes),
        "access_type": "offline",
        "prompt": "consent",
    }
    return RedirectResponse(f"{settings.GOOGLE_AUTH_URI}?{urlencode(params)}")


@router.get("/callback", response_model=SessionTokenResponse)
def google_callback(code: str, sessions: SessionService = Depends(get_session_service)):
    """Exchange the authorization code and open a session"""
    try:
        token_data = sessions.token_client.exchange_code(code)
    except requests.RequestException as e:
        logger.error(f"Token exchange failed: {e}")
        raise HTTPException(status_code=400, detail="Token exchange failed")

    try:
        idinfo = id_token.verify_oauth2_token(
            token_data["id_token"],
            google_requests.Request(),
            settings.GOOGLE_CLIENT_ID
        )
    except (KeyError, ValueError, GoogleAuthError) as e:
        logger.error(f"ID token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid ID token")

    session = sessions.create_session(
        access_token=token_data["access_token"],
        refresh_token=token_data.get("refresh_token"),
        expires_in=token_data.get("expires_in", 3600),
        email=idinfo.get("email"),
        name=idinfo.get("name"),
    )
    return _session_token_response(session)


@router.post("/session", response_model=SessionTokenResponse, status_code=201)
def open_session(
    credentials: CredentialPair,
    sessions: SessionService = Depends(get_session_service),
):
    """Open a session from an already-exchanged credential pair"""
    session = sessions.create_session(
        access_token=credentials.access_token,
        refresh_token=credentials.refresh_token,
        expires_in=credentials.expires_in,
        email=credentials.email,
        name=credentials.name,
    )
    return _session_token_response(session)


@router.get("/me")
def get_me(
    session: Session = Depends(get_current_session),
    sessions: SessionService = Depends(get_session_service),
):
    """Current session status"""
    return session.to_dict(sessions.clock())


@router.post("/logout")
def logout(
    session: Session = Depends(get_current_session),
    sessions: SessionService = Depends(get_session_service),
):
    sessions.discard_session(session.id)
    return {"message": "Signed out"}

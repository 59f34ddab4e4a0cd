"""
Session service - Google credential pairs behind signed session tokens
"""

import enum
import logging
import threading
import time
import uuid
from typing import Callable, Dict, Optional

import requests

from sheetforms.config import settings

logger = logging.getLogger(__name__)

REFRESH_ERROR = "RefreshAccessTokenError"


class CredentialState(str, enum.Enum):
    """Lifecycle of a session's access credential"""
    VALID = "valid"
    EXPIRING = "expiring"
    REFRESHING = "refreshing"
    FAILED = "failed"


class Session:
    """Authenticated context carrying a user's Google credentials"""

    def __init__(
        self,
        access_token: str,
        refresh_token: Optional[str],
        expires_at: float,
        email: Optional[str] = None,
        name: Optional[str] = None,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.expires_at = expires_at
        self.email = email
        self.name = name
        self.error: Optional[str] = None
        self._state = CredentialState.VALID
        self.refresh_lock = threading.Lock()

    def state(self, now: Optional[float] = None) -> CredentialState:
        """Current state; VALID turns into EXPIRING once inside the refresh leeway"""
        if self._state != CredentialState.VALID:
            return self._state
        now = time.time() if now is None else now
        if now >= self.expires_at - settings.TOKEN_REFRESH_LEEWAY_SECONDS:
            return CredentialState.EXPIRING
        return CredentialState.VALID

    def begin_refresh(self):
        self._state = CredentialState.REFRESHING

    def mark_refreshed(self, access_token: str, expires_at: float, refresh_token: Optional[str] = None):
        self.access_token = access_token
        self.expires_at = expires_at
        self.refresh_token = refresh_token or self.refresh_token
        self.error = None
        self._state = CredentialState.VALID

    def mark_failed(self):
        self.error = REFRESH_ERROR
        self._state = CredentialState.FAILED

    @property
    def failed(self) -> bool:
        return self._state == CredentialState.FAILED

    def to_dict(self, now: Optional[float] = None) -> Dict:
        return {
            'session_id': self.id,
            'email': self.email,
            'name': self.name,
            'state': self.state(now).value,
            'expires_at': self.expires_at,
            'error': self.error,
        }


class TokenClient:
    """Calls Google's OAuth token endpoint"""

    def __init__(self, token_uri: Optional[str] = None):
        self.token_uri = token_uri or settings.GOOGLE_TOKEN_URI

    def _post(self, data: Dict) -> Dict:
        payload = {
            'client_id': settings.GOOGLE_CLIENT_ID,
            'client_secret': settings.GOOGLE_CLIENT_SECRET,
            **data,
        }
        response = requests.post(self.token_uri, data=payload)
        response.raise_for_status()
        return response.json()

    def exchange_code(self, code: str) -> Dict:
        """Exchange an authorization code for access/refresh/id tokens"""
        return self._post({
            'code': code,
            'redirect_uri': settings.GOOGLE_REDIRECT_URI,
            'grant_type': 'authorization_code',
        })

    def refresh(self, refresh_token: str) -> Dict:
        """Exchange a refresh token for a new access token"""
        return self._post({
            'grant_type': 'refresh_token',
            'refresh_token': refresh_token,
        })


class SessionService:
    """Process-local session store with single-flight credential refresh"""

    def __init__(self, token_client: Optional[TokenClient] = None,
                 clock: Callable[[], float] = time.time):
        self.token_client = token_client or TokenClient()
        self.clock = clock
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        access_token: str,
        refresh_token: Optional[str],
        expires_in: float,
        email: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Session:
        session = Session(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=self.clock() + float(expires_in),
            email=email,
            name=name,
        )
        with self._lock:
            self._sessions[session.id] = session
        logger.info(f"Created session {session.id} for {email or 'unknown user'}")
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def discard_session(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed:
            logger.info(f"Discarded session {session_id}")
        return removed is not None

    def ensure_fresh(self, session: Session) -> Session:
        """
        Refresh the access credential if it is expiring

        Never raises: on failure the session is marked FAILED with
        error=RefreshAccessTokenError and callers must check `session.failed`.
        Only one refresh runs per session; callers that waited on it reuse
        its outcome.
        """
        if session.state(self.clock()) in (CredentialState.VALID, CredentialState.FAILED):
            return session

        with session.refresh_lock:
            # Another caller may have refreshed (or failed) while we waited
            if session.state(self.clock()) != CredentialState.EXPIRING:
                return session

            session.begin_refresh()
            if not session.refresh_token:
                logger.error(f"Session {session.id} has no refresh token")
                session.mark_failed()
                return session

            try:
                tokens = self.token_client.refresh(session.refresh_token)
                session.mark_refreshed(
                    tokens['access_token'],
                    self.clock() + float(tokens['expires_in']),
                    tokens.get('refresh_token'),
                )
            except (requests.RequestException, KeyError, TypeError, ValueError) as e:
                logger.error(f"Failed to refresh access token for session {session.id}: {e}")
                session.mark_failed()
                return session

            logger.info(f"Refreshed access token for session {session.id}")
            return session


session_service = SessionService()

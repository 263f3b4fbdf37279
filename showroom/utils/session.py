"""
Server-side session management for admin access.
Session state lives in a server-side store; the browser only holds a signed
session id in an httpOnly cookie (JWT, HS256).
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import logging
import secrets
import threading

from fastapi import HTTPException, Request, Response, status
from jose import JWTError, jwt

from showroom.config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass
class SessionData:
    """Server-side state for one browser session."""
    expires_at: datetime
    admin: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore:
    """
    In-process session store.
    Sessions expire after max_age_seconds; there is no sliding refresh.
    """

    def __init__(self, max_age_seconds: int):
        self.max_age = timedelta(seconds=max_age_seconds)
        self._sessions: Dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def create(self, admin: bool = False) -> tuple[str, SessionData]:
        session_id = secrets.token_urlsafe(32)
        data = SessionData(admin=admin, expires_at=datetime.now(timezone.utc) + self.max_age)
        with self._lock:
            self._sessions[session_id] = data
        return session_id, data

    def get(self, session_id: str) -> Optional[SessionData]:
        with self._lock:
            data = self._sessions.get(session_id)
            if data is not None and data.expires_at <= datetime.now(timezone.utc):
                del self._sessions[session_id]
                return None
            return data

    def destroy(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


session_store = SessionStore(settings.SESSION_MAX_AGE_SECONDS)


def encode_session_cookie(session_id: str, expires_at: datetime) -> str:
    """Sign a session id for the cookie."""
    return jwt.encode(
        {
            "sid": session_id,
            "exp": expires_at,
            "iat": datetime.now(timezone.utc),
            "type": "session",
        },
        settings.JWT_SECRET_KEY,
        algorithm=ALGORITHM,
    )


def decode_session_cookie(token: str) -> Optional[str]:
    """
    Verify a session cookie and return the session id it carries.

    Returns:
        The session id, or None if the token is invalid, expired or not a session token
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    return payload.get("sid")


def get_session_id(request: Request) -> Optional[str]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    return decode_session_cookie(token)


def get_session(request: Request) -> Optional[SessionData]:
    """Look up the server-side session for a request, if any."""
    session_id = get_session_id(request)
    if not session_id:
        return None
    return session_store.get(session_id)


def require_admin(request: Request) -> SessionData:
    """
    FastAPI dependency guarding admin routes.

    Raises:
        HTTPException: 401 if the request has no session with the admin flag set
    """
    session = get_session(request)
    if session is None or not session.admin:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return session


def start_admin_session(request: Request, response: Response) -> None:
    """Mark the caller's session as admin, creating a session if needed."""
    session_id = get_session_id(request)
    session = session_store.get(session_id) if session_id else None
    if session is None:
        session_id, session = session_store.create(admin=True)
    else:
        session.admin = True

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=encode_session_cookie(session_id, session.expires_at),
        max_age=int((session.expires_at - datetime.now(timezone.utc)).total_seconds()),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    logger.info("Admin session started")


def end_session(request: Request, response: Response) -> None:
    """Destroy the caller's session and clear the cookie."""
    session_id = get_session_id(request)
    if session_id and session_store.destroy(session_id):
        logger.info("Admin session ended")
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )

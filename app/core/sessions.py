"""
Server-side HTTP sessions.

Sessions are identified by a cookie and hold free-form attributes; the
account resource stores the authenticated ``login`` and ``groups`` there so
that following requests from a browser are recognized without credentials.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any, Dict, Optional

from starlette.requests import Request
from starlette.responses import Response

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class HttpSession:
    """Attribute bag bound to one browser session."""

    session_id: str
    created_at: datetime
    last_used: datetime
    expires_at: datetime
    attributes: Dict[str, Any] = field(default_factory=dict)
    is_new: bool = True

    def is_expired(self) -> bool:
        return datetime.now(timezone.utc) > self.expires_at

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value


class SessionStore:
    """In-memory, thread-safe session registry."""

    def __init__(
        self,
        duration_hours: Optional[int] = None,
        cleanup_interval_minutes: Optional[int] = None,
    ):
        self._sessions: Dict[str, HttpSession] = {}
        self._lock = Lock()
        self.duration_hours = duration_hours or settings.SESSION_DURATION_HOURS
        if cleanup_interval_minutes is None:
            cleanup_interval_minutes = settings.SESSION_CLEANUP_INTERVAL_MINUTES
        self.cleanup_interval = timedelta(minutes=cleanup_interval_minutes)
        self._last_cleanup = datetime.now(timezone.utc)

    def create_session(self) -> HttpSession:
        # Sessions whose cookie never comes back are only reclaimed here
        if datetime.now(timezone.utc) - self._last_cleanup >= self.cleanup_interval:
            self.cleanup_expired_sessions()

        with self._lock:
            now = datetime.now(timezone.utc)
            session = HttpSession(
                session_id=uuid.uuid4().hex,
                created_at=now,
                last_used=now,
                expires_at=now + timedelta(hours=self.duration_hours),
            )
            self._sessions[session.session_id] = session

        logger.debug("Session created", session_id=session.session_id[:8] + "...")
        return session

    def get_session(self, session_id: Optional[str]) -> Optional[HttpSession]:
        """Return a live session and refresh its expiry, or None."""
        if not session_id:
            return None

        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            if session.is_expired():
                del self._sessions[session_id]
                logger.info("Session expired and removed", session_id=session_id[:8] + "...")
                return None

            now = datetime.now(timezone.utc)
            session.last_used = now
            session.expires_at = now + timedelta(hours=self.duration_hours)
            session.is_new = False
            return session

    def invalidate_session(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False

        with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is not None:
            logger.info(
                "Session invalidated",
                session_id=session_id[:8] + "...",
                login=session.get_attribute("login"),
            )
            return True
        return False

    def cleanup_expired_sessions(self) -> int:
        with self._lock:
            now = datetime.now(timezone.utc)
            expired = [sid for sid, s in self._sessions.items() if s.expires_at <= now]
            for session_id in expired:
                del self._sessions[session_id]
            self._last_cleanup = now

        if expired:
            logger.info("Expired sessions cleaned up", count=len(expired))
        return len(expired)

    def get_active_session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    # Request/response helpers

    def get_request_session(self, request: Request, create: bool = True) -> Optional[HttpSession]:
        """Session of the request's cookie, creating one when asked."""
        session = self.get_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
        if session is None and create:
            session = self.create_session()
        return session

    def invalidate(self, session: Optional[HttpSession], response: Response) -> bool:
        """Drop the session, if any, and clear its cookie on the response."""
        removed = session is not None and self.invalidate_session(session.session_id)
        response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
        return removed

    def attach(self, session: HttpSession, response: Response) -> None:
        """Set the session cookie on the response."""
        response.set_cookie(
            settings.SESSION_COOKIE_NAME,
            session.session_id,
            max_age=self.duration_hours * 3600,
            path="/",
            httponly=True,
            secure=settings.SESSION_COOKIE_SECURE,
            samesite="lax",
        )


# Global session store
session_store = SessionStore()

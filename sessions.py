"""
sessions.py
-----------
Server-side session registry.

Tokens are signed JWTs carrying the user id, a session id and an expiry.
A token is only honoured while its session id is still registered, so
`expire` revokes it before the JWT itself runs out.
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from config import ALGORITHM, SECRET_KEY, SESSION_EXPIRE_MINUTES
from logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    """In-memory session registry. One instance per application."""

    def __init__(
        self,
        secret_key: str = SECRET_KEY,
        algorithm: str = ALGORITHM,
        expire_minutes: int = SESSION_EXPIRE_MINUTES,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        # sid -> (user_id, expires_at)
        self._sessions: dict[str, tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def create(self, user_id: int) -> str:
        session_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        expire = now + timedelta(minutes=self.expire_minutes)
        payload = {"sub": str(user_id), "sid": session_id, "exp": expire}
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        with self._lock:
            self._purge_expired(now)
            self._sessions[session_id] = (user_id, expire)
        return token

    def read(self, token: Optional[str]) -> Optional[int]:
        """Return the user id bound to `token`, or None if it is not a live session."""
        if not token:
            return None
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired session token")
            self.expire(token)
            return None
        except jwt.InvalidTokenError:
            logger.warning("Rejected malformed session token")
            return None
        with self._lock:
            user_id, _ = self._sessions.get(payload.get("sid"), (None, None))
        if user_id is None or str(user_id) != payload.get("sub"):
            return None
        return user_id

    def expire(self, token: Optional[str]) -> None:
        """Forget the session behind `token`. Unknown or bad tokens are ignored."""
        if not token:
            return
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except jwt.InvalidTokenError:
            return
        with self._lock:
            self._sessions.pop(payload.get("sid"), None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_expired(self, now: datetime) -> None:
        # Caller holds the lock
        stale = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info(f"Purged {len(stale)} expired session(s)")

"""Bounded in-memory registry for chat sessions with idle expiry."""

import time
import uuid
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional

from .logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    """
    In-memory session registry with an idle TTL and a size cap.

    Every successful lookup refreshes the session. When the cap is exceeded
    the least recently used session is evicted.
    """

    def __init__(
        self,
        max_sessions: int = 500,
        idle_ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize store.

        Args:
            max_sessions: Most sessions kept at once
            idle_ttl_seconds: Seconds without access before a session expires
            clock: Monotonic time source
        """
        self.max_sessions = max_sessions
        self.idle_ttl_seconds = idle_ttl_seconds
        self._clock = clock
        self._sessions: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return self.get(session_id) is not None

    def add(self, value: Any) -> str:
        """
        Register a session under a fresh id.

        Returns:
            The new session id
        """
        self.cleanup_expired()

        session_id = uuid.uuid4().hex
        self._sessions[session_id] = {"value": value, "last_seen": self._clock()}

        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(
                "Session evicted",
                extra={"session_id": evicted, "max_sessions": self.max_sessions}
            )

        return session_id

    def get(self, session_id: str) -> Optional[Any]:
        """Return the session and mark it used, or None if unknown or expired."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        now = self._clock()
        if now - entry["last_seen"] > self.idle_ttl_seconds:
            del self._sessions[session_id]
            logger.info("Session expired", extra={"session_id": session_id})
            return None

        entry["last_seen"] = now
        self._sessions.move_to_end(session_id)
        return entry["value"]

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def cleanup_expired(self):
        """Remove every session idle past the TTL."""
        now = self._clock()
        expired = [
            session_id for session_id, entry in self._sessions.items()
            if now - entry["last_seen"] > self.idle_ttl_seconds
        ]

        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.info(f"Session cleanup: {len(expired)} expired sessions removed")

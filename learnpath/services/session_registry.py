"""
In-process registry of open lesson sessions.
"""

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Callable, Dict, Optional

from learnpath.config import get_settings
from learnpath.services.lesson_session import LessonSession
from learnpath.utils.common import utcnow
from learnpath.utils.logger import get_logger

logger = get_logger("sessions")


class LessonSessionRegistry:
    """
    Open sessions by id. A learner has at most one open view per lesson, and
    sessions nobody has touched for `idle_timeout` are dropped.
    """

    def __init__(self, idle_timeout: timedelta = timedelta(hours=1), clock: Callable[[], datetime] = utcnow):
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._active_sessions: Dict[str, LessonSession] = {}
        self._last_seen: Dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._active_sessions)

    def add(self, session: LessonSession) -> None:
        self.prune()
        for other in list(self._active_sessions.values()):
            if other.context.user_id == session.context.user_id and other.lesson.id == session.lesson.id:
                logger.info("replacing open session id=%s lesson=%s", other.id, other.lesson.id)
                self._discard(other.id)
        self._active_sessions[session.id] = session
        self._last_seen[session.id] = self._clock()

    def get(self, session_id: str, user_id: str) -> Optional[LessonSession]:
        session = self._active_sessions.get(session_id)
        if session is None or session.context.user_id != user_id:
            return None
        self._last_seen[session_id] = self._clock()
        return session

    def close(self, session_id: str, user_id: str) -> bool:
        if self.get(session_id, user_id) is None:
            return False
        self._discard(session_id)
        logger.debug("session closed id=%s", session_id)
        return True

    def prune(self) -> int:
        """Drop idle sessions; returns how many went."""
        cutoff = self._clock() - self.idle_timeout
        idle = [sid for sid, seen in self._last_seen.items() if seen < cutoff]
        for sid in idle:
            self._discard(sid)
        if idle:
            logger.info("pruned idle sessions count=%s", len(idle))
        return len(idle)

    def _discard(self, session_id: str) -> None:
        self._active_sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)


@lru_cache()
def get_session_registry() -> LessonSessionRegistry:
    return LessonSessionRegistry(idle_timeout=timedelta(minutes=get_settings().SESSION_IDLE_MINUTES))

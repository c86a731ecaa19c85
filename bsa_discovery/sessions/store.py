"""
WizardSessionStore - in-memory wizard sessions keyed by short ids.

Nothing is persisted: a session lives until it is deleted, evicted for
idleness or the process stops. Thread-safe with an RLock since FastAPI
runs sync endpoints in a worker pool.
"""

import threading
import time
import uuid
from typing import Callable, Dict, Optional

import structlog

from bsa_discovery.config.models import WizardSettings
from bsa_discovery.exceptions import SessionNotFoundError
from bsa_discovery.questionnaire.generator import QuestionnaireGenerator
from bsa_discovery.scheduling import LoopScheduler, Scheduler
from bsa_discovery.sessions.session import WizardSession
from bsa_discovery.uploads.simulator import default_id_factory

logger = structlog.get_logger("session")


class WizardSessionStore:
    """
    Creates, looks up and tears down wizard sessions.

    Args:
        settings: Shared settings for every session.
        scheduler: Timer source; defaults to the running asyncio loop.
        generator: Shared questionnaire generator (the question bank is cached).
        id_factory: Upload id generator handed to each session.
        clock: Monotonic clock for idle tracking.
    """

    def __init__(
        self,
        settings: Optional[WizardSettings] = None,
        scheduler: Optional[Scheduler] = None,
        generator: Optional[QuestionnaireGenerator] = None,
        id_factory: Callable[[], str] = default_id_factory,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or WizardSettings()
        self.scheduler = scheduler or LoopScheduler()
        self.generator = generator or QuestionnaireGenerator()
        self._id_factory = id_factory
        self._clock = clock
        self._lock = threading.RLock()
        self._sessions: Dict[str, WizardSession] = {}

    def create(self) -> WizardSession:
        with self._lock:
            if len(self._sessions) >= self.settings.sessions.max_sessions:
                self._evict_least_recent()

            session_id = self._new_session_id()
            session = WizardSession(
                session_id,
                self.scheduler,
                settings=self.settings,
                generator=self.generator,
                id_factory=self._id_factory,
                clock=self._clock,
            )
            self._sessions[session_id] = session

        logger.info("session_created", session_id=session_id, active=len(self._sessions))
        return session

    def get(self, session_id: str) -> WizardSession:
        """
        Look up a session and mark it active.

        Raises:
            SessionNotFoundError: Unknown or evicted id
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            session.touch()
            return session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("session_deleted", session_id=session_id, active=len(self._sessions))
        return True

    def evict_idle(self) -> int:
        """Close sessions idle longer than the configured TTL. Returns count."""
        ttl = self.settings.sessions.idle_ttl_seconds
        with self._lock:
            stale = [sid for sid, s in self._sessions.items() if s.idle_seconds() > ttl]
            sessions = [self._sessions.pop(sid) for sid in stale]

        for session in sessions:
            session.close()
        if sessions:
            logger.info("sessions_evicted", count=len(sessions), ttl_seconds=ttl, active=len(self._sessions))
        return len(sessions)

    def close_all(self) -> int:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()
        if sessions:
            logger.info("sessions_closed", count=len(sessions))
        return len(sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _new_session_id(self) -> str:
        while True:
            candidate = uuid.uuid4().hex[:8]
            if candidate not in self._sessions:
                return candidate

    def _evict_least_recent(self) -> None:
        oldest_id = min(self._sessions, key=lambda sid: self._sessions[sid].last_active)
        self._sessions.pop(oldest_id).close()
        logger.warning("session_evicted_capacity", session_id=oldest_id)

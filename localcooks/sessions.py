# localcooks/sessions.py
from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from collections.abc import Callable

from .store import ApplicationFormStore
from .submission import SubmissionOrchestrator

logger = logging.getLogger(__name__)

@dataclass
class WizardSession:
    store: ApplicationFormStore
    orchestrator: SubmissionOrchestrator
    last_access: float = field(default=0.0)

class WizardSessionRegistry:
    """
    One wizard per browser, kept across the auth redirect so the applicant can
    resume. Sessions untouched for `max_idle_seconds` are dropped by
    `evict_idle`, unless a submission is still in flight.
    """

    def __init__(self, max_idle_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._max_idle_seconds = max_idle_seconds
        self._clock = clock
        self._sessions: dict[str, WizardSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, key: object) -> bool:
        return key in self._sessions

    def get(self, key: str, factory: Callable[[], WizardSession]) -> WizardSession:
        session = self._sessions.get(key)
        if session is None:
            session = factory()
            self._sessions[key] = session
        session.last_access = self._clock()
        return session

    def discard(self, key: str) -> None:
        self._sessions.pop(key, None)

    def evict_idle(self) -> int:
        """Drops idle sessions and returns how many were dropped."""
        cutoff = self._clock() - self._max_idle_seconds
        idle = [
            key for key, session in self._sessions.items()
            if session.last_access < cutoff and not session.orchestrator.is_pending
        ]
        for key in idle:
            del self._sessions[key]
        if idle:
            logger.info(f"Evicted {len(idle)} idle wizard session(s), {len(self._sessions)} left.")
        return len(idle)

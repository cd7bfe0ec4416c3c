"""In-memory learner sessions.

One session per open module page. It owns the module flow and the hint timers
of the active task; nothing here touches the database.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass, field

from satslab.learning.flow import ModuleFlow
from satslab.learning.hints import Clock, HintPolicy
from satslab.learning.models import LearningModule
from satslab.learning.timers import HintTimers
from satslab.validation.service import ValidationService

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    """No open session with that id."""


@dataclass
class LearnerSession:
    id: str
    flow: ModuleFlow
    user_id: str | None
    clock: Clock = time.monotonic
    started_at: float = 0.0
    last_seen: float = 0.0
    badge_earned: bool = False
    # Seconds carried over from earlier sessions on the same module.
    time_offset: int = 0
    timers: HintTimers = field(init=False)

    def __post_init__(self) -> None:
        now = self.clock()
        self.started_at = self.started_at or now
        self.last_seen = self.last_seen or now
        self.timers = HintTimers(self.flow.engine)

    @property
    def module(self) -> LearningModule:
        return self.flow.module

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def touch(self) -> None:
        self.last_seen = self.clock()

    def time_spent(self) -> int:
        return self.time_offset + int(self.clock() - self.started_at)

    def task_changed(self) -> None:
        """Re-arm the hint timers for whatever task is active now. Nothing runs before the task phase."""
        if self.flow.tasks_started:
            self.timers.arm()
        else:
            self.timers.cancel()

    def close(self) -> None:
        self.timers.cancel()


class SessionManager:
    """Registry of open learner sessions keyed by an unguessable id."""

    def __init__(
        self,
        idle_timeout_seconds: float = 3600,
        hint_policy: HintPolicy | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.idle_timeout_seconds = idle_timeout_seconds
        self.hint_policy = hint_policy or HintPolicy()
        self.clock = clock
        self._sessions: dict[str, LearnerSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(
        self,
        module: LearningModule,
        validator: ValidationService,
        user_id: str | None = None,
    ) -> LearnerSession:
        self.prune_idle()
        flow = ModuleFlow(module, validator, hint_policy=self.hint_policy, clock=self.clock)
        session = LearnerSession(
            id=secrets.token_urlsafe(16),
            flow=flow,
            user_id=user_id,
            clock=self.clock,
        )
        self._sessions[session.id] = session
        logger.info("Opened session %s on module %s", session.id, module.id)
        return session

    def get(self, session_id: str) -> LearnerSession:
        """Return an open session and mark it as seen. Raises SessionNotFound."""
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        session.touch()
        return session

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def prune_idle(self) -> int:
        """Close sessions not seen for longer than the idle timeout."""
        cutoff = self.clock() - self.idle_timeout_seconds
        stale = [sid for sid, s in self._sessions.items() if s.last_seen < cutoff]
        for sid in stale:
            self.close(sid)
        if stale:
            logger.info("Pruned %d idle sessions", len(stale))
        return len(stale)

    def close_all(self) -> None:
        for sid in list(self._sessions):
            self.close(sid)
